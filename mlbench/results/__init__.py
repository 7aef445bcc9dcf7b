"""
Results module for benchmark experiments.

Provides:
- ResampleResult: Outcome of one learner on one task
- ResamplePrediction: Test-set predictions of a resampling
- FailureRecord: Dataclass for tracking failed iterations
- BenchmarkResult: Results of all (task, learner) pairs
- merge_benchmark_results: Combine results of separate runs
- save_benchmark_result / load_benchmark_result: Persistence
"""

from .types import ResampleResult, ResamplePrediction, FailureRecord
from .benchmark_result import BenchmarkResult, LearnerInfo
from .merge import merge_benchmark_results
from .storage import save_benchmark_result, load_benchmark_result

__all__ = [
    'ResampleResult',
    'ResamplePrediction',
    'FailureRecord',
    'BenchmarkResult',
    'LearnerInfo',
    'merge_benchmark_results',
    'save_benchmark_result',
    'load_benchmark_result',
]
