"""
Benchmark experiments: several learners on several tasks.
"""
import random
from typing import List, Optional, Sequence, Union

import numpy as np
import torch

from ..learners.base import Learner
from ..learners.registry import make_learner
from ..measures.measures import Measure, default_measure, resolve_measure, timetrain
from ..resampling.desc import ResampleDesc, ResampleInstance, make_resample_instance
from ..resampling.resample import resample, warn_missing_prob, ON_LEARNER_ERROR
from ..results.benchmark_result import BenchmarkResult
from ..results.merge import merge_benchmark_results
from ..tasks.task import ClassifTask
from .progress import ProgressTracker


def set_seed(seed: int):
    """Seed python, numpy and torch random number generators."""
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)


def _as_list(obj) -> list:
    if obj is None:
        return []
    if isinstance(obj, (list, tuple)):
        return list(obj)
    return [obj]


def _check_unique(ids: List[str], kind: str):
    seen, dups = set(), []
    for i in ids:
        if i in seen:
            dups.append(i)
        seen.add(i)
    if dups:
        raise ValueError(f"{kind} ids must be unique, duplicated: {sorted(set(dups))}")


def _resolve_resamplings(resamplings, tasks: List[ClassifTask]) -> List[Union[ResampleDesc, ResampleInstance]]:
    if resamplings is None:
        return [ResampleDesc("CV", iters=10)] * len(tasks)
    if isinstance(resamplings, (ResampleDesc, ResampleInstance)):
        return [resamplings] * len(tasks)
    resamplings = list(resamplings)
    if len(resamplings) != len(tasks):
        raise ValueError(
            f"Got {len(resamplings)} resampling strategies for {len(tasks)} tasks. "
            "Pass a single strategy or one per task."
        )
    return resamplings


def _resolve_measures(measures, tasks: List[ClassifTask]) -> List[Measure]:
    measures = [resolve_measure(m) for m in _as_list(measures)]
    if not measures:
        measures = [default_measure(tasks[0])]
    _check_unique([m.id for m in measures], "Measure")
    if timetrain.id not in [m.id for m in measures]:
        measures.append(timetrain)
    return measures


def benchmark(
    learners,
    tasks,
    resamplings=None,
    measures: Optional[Sequence[Union[Measure, str]]] = None,
    keep_pred: bool = True,
    models: bool = False,
    seed: Optional[int] = None,
    on_learner_error: str = "warn",
    show_info: bool = True,
) -> BenchmarkResult:
    """
    Run a benchmark experiment.

    Every learner is resampled on every task. Resampling descriptions are
    instantiated once per task, so all learners on a task are evaluated on
    identical train/test splits.

    Args:
        learners: Learner, learner id, or a list of them.
        tasks: Task or list of tasks.
        resamplings: One ResampleDesc/ResampleInstance for all tasks or a list
            with one per task. Defaults to 10-fold cross-validation.
        measures: Measures or measure ids. Defaults to the first task's default
            measure; training time is always recorded.
        keep_pred: Keep test-set predictions.
        models: Keep fitted models.
        seed: Seed python/numpy/torch before instantiating the resamplings.
        on_learner_error: 'stop', 'warn' or 'quiet' (see resample()).
        show_info: Print progress information.

    Returns:
        BenchmarkResult grouped by task, then learner.
    """
    learners = [make_learner(l) if isinstance(l, str) else l for l in _as_list(learners)]
    tasks = _as_list(tasks)
    if not learners:
        raise ValueError("No learners given")
    if not tasks:
        raise ValueError("No tasks given")
    if not all(isinstance(l, Learner) for l in learners):
        raise ValueError("learners must be Learner objects or learner ids")
    if not all(isinstance(t, ClassifTask) for t in tasks):
        raise ValueError("tasks must be ClassifTask objects")
    if on_learner_error not in ON_LEARNER_ERROR:
        raise ValueError(f"on_learner_error must be one of {ON_LEARNER_ERROR}, got '{on_learner_error}'")

    _check_unique([l.id for l in learners], "Learner")
    _check_unique([t.id for t in tasks], "Task")

    resamplings = _resolve_resamplings(resamplings, tasks)
    measures = _resolve_measures(measures, tasks)

    # Fail early on measures that cannot work for a task
    for task in tasks:
        for m in measures:
            if m.requires_binary and not task.is_binary:
                raise ValueError(
                    f"Measure '{m.id}' requires a binary task, but task '{task.id}' "
                    f"has {len(task.class_levels)} classes"
                )

    if seed is not None:
        set_seed(seed)

    instances = {}
    for task, r in zip(tasks, resamplings):
        instances[task.id] = r if isinstance(r, ResampleInstance) else make_resample_instance(r, task=task)

    # once per (learner, measure), not once per task
    for learner in learners:
        warn_missing_prob(measures, learner, stacklevel=3)

    progress = ProgressTracker(len(tasks), len(learners), quiet=not show_info)
    progress.start()

    results = {}
    for task in tasks:
        results[task.id] = {}
        for learner in learners:
            progress.begin_pair(task.id, learner.id)
            rr = resample(
                learner,
                task,
                instances[task.id],
                measures=measures,
                models=models,
                keep_pred=keep_pred,
                on_learner_error=on_learner_error,
                warn_prob=False,
            )
            results[task.id][learner.id] = rr
            progress.end_pair(rr.aggr, n_errors=len(rr.err_msgs))

    progress.finish()

    return BenchmarkResult(
        results=results,
        measures=measures,
        learners={l.id: l for l in learners},
        resamplings=instances,
    )


def _reject_measures(kwargs):
    if 'measures' in kwargs:
        raise ValueError("The measures of the existing benchmark result are reused; do not pass 'measures'")


def add_learners(bmr: BenchmarkResult, learners, tasks, **kwargs) -> BenchmarkResult:
    """
    Evaluate further learners on the tasks of an existing result and merge.

    The resample instances stored in bmr are reused, so the new learners
    see the same splits as the old ones.

    Args:
        bmr: Existing benchmark result.
        learners: New learners.
        tasks: Task objects of bmr (results only store task ids).
        **kwargs: Further arguments for benchmark().
    """
    _reject_measures(kwargs)
    tasks = _as_list(tasks)
    missing = [t.id for t in tasks if t.id not in bmr.resamplings]
    if missing:
        raise ValueError(f"Tasks {missing} are not part of the benchmark result")
    resamplings = [bmr.resamplings[t.id] for t in tasks]
    new = benchmark(learners, tasks, resamplings, measures=bmr.get_measures(), **kwargs)
    return merge_benchmark_results([bmr, new])


def add_tasks(bmr: BenchmarkResult, tasks, resamplings=None, **kwargs) -> BenchmarkResult:
    """
    Evaluate the learners of an existing result on further tasks and merge.

    Raises:
        ValueError: If bmr was loaded from disk (learners are descriptions only).
    """
    _reject_measures(kwargs)
    learners = bmr.get_learners()
    if not all(isinstance(l, Learner) for l in learners):
        raise ValueError("Learners of a loaded benchmark result cannot be retrained; pass a fresh result")
    new = benchmark(learners, tasks, resamplings, measures=bmr.get_measures(), **kwargs)
    return merge_benchmark_results([bmr, new])
