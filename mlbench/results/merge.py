"""
Merging benchmark results from separate runs.
"""
from typing import Dict, List, Sequence, Tuple

from .benchmark_result import BenchmarkResult
from .types import ResampleResult


def merge_benchmark_results(bmrs: Sequence[BenchmarkResult]) -> BenchmarkResult:
    """
    Combine several benchmark results into one.

    New (task, learner) pairs are appended: tasks keep the order of first
    appearance, and within a task learners keep the order in which they
    were first seen.

    Args:
        bmrs: Benchmark results to merge.

    Returns:
        Merged BenchmarkResult.

    Raises:
        ValueError: If measures or their aggregations differ, a (task, learner) pair occurs more
            than once, or a task was resampled with different splits.
    """
    bmrs = list(bmrs)
    if not bmrs:
        raise ValueError("Need at least one benchmark result to merge")
    if not all(isinstance(b, BenchmarkResult) for b in bmrs):
        raise ValueError("All objects to merge must be BenchmarkResult instances")

    measure_ids = bmrs[0].get_measure_ids()
    aggr_ids = sorted(m.aggr_id for m in bmrs[0].get_measures())
    for i, bmr in enumerate(bmrs[1:], start=1):
        if sorted(bmr.get_measure_ids()) != sorted(measure_ids):
            raise ValueError(
                f"Benchmark result {i} has measures {bmr.get_measure_ids()}, expected {measure_ids}. "
                "All results must use the same measures."
            )
        other_aggr_ids = sorted(m.aggr_id for m in bmr.get_measures())
        if other_aggr_ids != aggr_ids:
            raise ValueError(
                f"Benchmark result {i} aggregates as {other_aggr_ids}, expected {aggr_ids}. "
                "All results must use the same aggregations."
            )

    results: Dict[str, Dict[str, ResampleResult]] = {}
    learners = {}
    resamplings = {}
    duplicates: List[Tuple[str, str]] = []

    for bmr in bmrs:
        for task_id, learner_id, rr in bmr.iter_results():
            per_task = results.setdefault(task_id, {})
            if learner_id in per_task:
                duplicates.append((task_id, learner_id))
                continue
            per_task[learner_id] = rr

        for learner_id, learner in bmr.learners.items():
            learners.setdefault(learner_id, learner)

        for task_id, instance in bmr.resamplings.items():
            if task_id not in resamplings:
                resamplings[task_id] = instance
            elif not resamplings[task_id].same_splits(instance):
                raise ValueError(
                    f"Task '{task_id}' was resampled with different splits in the results to merge. "
                    "Reuse the same resample instance to keep results comparable."
                )

    if duplicates:
        pairs = ", ".join(f"({t}, {l})" for t, l in duplicates)
        raise ValueError(f"Task-learner pairs occur in more than one benchmark result: {pairs}")

    return BenchmarkResult(
        results=results,
        measures=bmrs[0].get_measures(),
        learners=learners,
        resamplings=resamplings,
    )
