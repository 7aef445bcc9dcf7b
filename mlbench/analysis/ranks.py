"""
Rank matrices of learners across tasks.
"""
import numpy as np
import pandas as pd

from ..results.benchmark_result import BenchmarkResult


TIES_METHODS = ("average", "min", "max", "first", "dense")
AGGREGATIONS = ("default", "mean")


def get_aggr_matrix(bmr: BenchmarkResult, measure=None, aggregation: str = "default") -> pd.DataFrame:
    """
    Aggregated performance as a learners x tasks matrix.

    Args:
        bmr: Benchmark result.
        measure: Measure or measure id (default: first measure of bmr).
        aggregation: 'default' uses the measure's own aggregation, 'mean'
            the plain mean of the per-iteration performances.

    Pairs missing from the result (e.g. after merging unequal runs) are NaN.
    """
    if aggregation not in AGGREGATIONS:
        raise ValueError(f"aggregation must be one of {AGGREGATIONS}, got '{aggregation}'")

    measure = bmr.get_measure(measure)
    mat = pd.DataFrame(
        np.nan,
        index=pd.Index(bmr.get_learner_ids(), name='learner_id'),
        columns=pd.Index(bmr.get_task_ids(), name='task_id'),
    )
    for task_id, learner_id, rr in bmr.iter_results():
        if aggregation == "mean":
            mat.loc[learner_id, task_id] = float(np.mean(rr.measures_test[measure.id].to_numpy(dtype=float)))
        else:
            mat.loc[learner_id, task_id] = bmr.aggregate(rr, measure)
    return mat


def convert_bmr_to_rank_matrix(
    bmr: BenchmarkResult,
    measure=None,
    ties_method: str = "average",
    aggregation: str = "default",
) -> pd.DataFrame:
    """
    Rank learners on every task.

    Rank 1 is the best learner on a task, respecting whether the measure is
    minimized or maximized. Missing performances get no rank (NaN).

    Args:
        bmr: Benchmark result.
        measure: Measure or measure id (default: first measure of bmr).
        ties_method: How to rank ties ('average', 'min', 'max', 'first', 'dense').
        aggregation: 'default' ranks the aggregated performance, 'mean' ranks
            the mean of the per-iteration performances.

    Returns:
        DataFrame with learners as rows and tasks as columns.
    """
    if ties_method not in TIES_METHODS:
        raise ValueError(f"ties_method must be one of {TIES_METHODS}, got '{ties_method}'")

    measure = bmr.get_measure(measure)
    mat = get_aggr_matrix(bmr, measure, aggregation=aggregation)
    return mat.rank(axis=0, method=ties_method, ascending=measure.minimize)
