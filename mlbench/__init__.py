"""
Benchmark experiments for classification learners.

Compare learners on tasks with shared resampling splits, query and merge
the results, test for significant differences and plot them.
"""
from .tasks import ClassifTask, make_task, task_from_csv, list_tasks
from .learners import Learner, make_learner, list_learners
from .measures import get_measure, list_measures, set_aggregation
from .resampling import make_resample_desc, make_resample_instance, resample
from .results import BenchmarkResult, merge_benchmark_results, save_benchmark_result, load_benchmark_result
from .experiment import benchmark, add_learners, add_tasks
from .analysis import (
    convert_bmr_to_rank_matrix,
    friedman_test_bmr,
    friedman_posthoc_test_bmr,
    generate_crit_differences_data,
    generate_thresh_vs_perf_data,
)

__version__ = "0.1.0"

__all__ = [
    'ClassifTask',
    'make_task',
    'task_from_csv',
    'list_tasks',
    'Learner',
    'make_learner',
    'list_learners',
    'get_measure',
    'list_measures',
    'set_aggregation',
    'make_resample_desc',
    'make_resample_instance',
    'resample',
    'BenchmarkResult',
    'merge_benchmark_results',
    'save_benchmark_result',
    'load_benchmark_result',
    'benchmark',
    'add_learners',
    'add_tasks',
    'convert_bmr_to_rank_matrix',
    'friedman_test_bmr',
    'friedman_posthoc_test_bmr',
    'generate_crit_differences_data',
    'generate_thresh_vs_perf_data',
]
