"""Benchmark execution and run management."""
from .logger import Logger, setup_logging, restore_logging
from .manager import ExperimentManager
from .progress import ProgressTracker, format_duration
from .benchmark import benchmark, add_learners, add_tasks, set_seed

__all__ = [
    'Logger',
    'setup_logging',
    'restore_logging',
    'ExperimentManager',
    'ProgressTracker',
    'format_duration',
    'benchmark',
    'add_learners',
    'add_tasks',
    'set_seed',
]
