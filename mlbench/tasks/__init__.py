"""
Tasks module for benchmark experiments.

Provides:
- ClassifTask: Dataset bundled with its target column
- make_task: Factory for built-in tasks
- task_from_csv: Load a task from a CSV file
"""

from .task import ClassifTask
from .registry import make_task, task_from_csv, list_tasks

__all__ = [
    'ClassifTask',
    'make_task',
    'task_from_csv',
    'list_tasks',
]
