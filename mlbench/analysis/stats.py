"""
Non-parametric tests comparing learners over tasks.

Friedman test (tasks are blocks, learners are treatments) and the
Nemenyi post-hoc test on mean ranks.
"""
import warnings
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd
from scipy import stats

from ..results.benchmark_result import BenchmarkResult
from .ranks import convert_bmr_to_rank_matrix, get_aggr_matrix


@dataclass
class FriedmanTestResult:
    """Outcome of the Friedman rank sum test."""
    statistic: float
    p_value: float
    df: int
    n_tasks: int
    n_learners: int
    measure_id: str
    method: str = "Friedman rank sum test"

    def __str__(self) -> str:
        return (
            f"\t{self.method}\n\n"
            f"data: {self.measure_id} of {self.n_learners} learners on {self.n_tasks} tasks\n"
            f"Friedman chi-squared = {self.statistic:.4f}, df = {self.df}, p-value = {self.p_value:.4g}"
        )


@dataclass
class FriedmanPosthocResult:
    """Outcome of the Nemenyi post-hoc test following a Friedman test."""
    friedman: FriedmanTestResult
    f_rejnull: bool
    p_value_threshold: float
    mean_ranks: pd.Series
    p_values: Optional[pd.DataFrame] = None
    critical_difference: Optional[float] = None
    method: str = "Nemenyi multiple comparison test"

    def __str__(self) -> str:
        lines = [str(self.friedman), ""]
        if not self.f_rejnull:
            lines.append(f"Cannot reject the null hypothesis of the overall Friedman test "
                         f"at p-value threshold {self.p_value_threshold}.")
            return "\n".join(lines)
        lines.append(f"\t{self.method}\n")
        lines.append(self.p_values.round(4).to_string())
        lines.append(f"\nCritical difference: {self.critical_difference:.4f}")
        return "\n".join(lines)


def _complete_matrix(bmr: BenchmarkResult, measure, aggregation: str) -> pd.DataFrame:
    """Aggregated performance matrix (learners x tasks) without missing values."""
    mat = get_aggr_matrix(bmr, measure, aggregation=aggregation)
    if mat.isna().any().any():
        missing = [(t, l) for l in mat.index for t in mat.columns if pd.isna(mat.loc[l, t])]
        raise ValueError(
            f"Friedman tests need the performance of every learner on every task; missing or NaN for {missing}"
        )
    return mat


def _check_dims(n_learners: int, n_tasks: int):
    if n_learners < 2:
        raise ValueError(f"Need at least 2 learners for a Friedman test, got {n_learners}")
    if n_tasks < 2:
        raise ValueError(f"Need at least 2 tasks for a Friedman test, got {n_tasks}")


def friedman_statistic(values: np.ndarray):
    """
    Friedman chi-squared statistic with tie correction.

    Args:
        values: Array of shape (n_blocks, n_treatments).

    Returns:
        Tuple of (statistic, p_value, df).
    """
    n, k = values.shape
    ranks = np.apply_along_axis(stats.rankdata, 1, values)
    rank_sums = ranks.sum(axis=0)
    ties = 0.0
    for row in ranks:
        _, counts = np.unique(row, return_counts=True)
        ties += np.sum(counts ** 3 - counts)
    denom = n * k * (k + 1) - ties / (k - 1)
    if denom == 0:
        return float('nan'), float('nan'), k - 1
    statistic = 12.0 * np.sum((rank_sums - n * (k + 1) / 2.0) ** 2) / denom
    p_value = stats.chi2.sf(statistic, k - 1)
    return float(statistic), float(p_value), k - 1


def friedman_test_bmr(bmr: BenchmarkResult, measure=None, aggregation: str = "default") -> FriedmanTestResult:
    """
    Friedman test of the null hypothesis that all learners perform equally.

    Args:
        bmr: Benchmark result with at least 2 learners and 2 tasks.
        measure: Measure or measure id (default: first measure of bmr).
        aggregation: 'default' or 'mean', see get_aggr_matrix().

    Returns:
        FriedmanTestResult.

    Raises:
        ValueError: If fewer than 2 learners or tasks, or if a performance is missing.
    """
    measure = bmr.get_measure(measure)
    mat = _complete_matrix(bmr, measure, aggregation)
    n_learners, n_tasks = mat.shape
    _check_dims(n_learners, n_tasks)

    statistic, p_value, df = friedman_statistic(mat.to_numpy().T)
    return FriedmanTestResult(
        statistic=statistic,
        p_value=p_value,
        df=df,
        n_tasks=n_tasks,
        n_learners=n_learners,
        measure_id=measure.id,
    )


def nemenyi_critical_difference(n_learners: int, n_tasks: int, p_value: float = 0.05) -> float:
    """Critical difference of mean ranks for the Nemenyi test."""
    q_alpha = stats.studentized_range.ppf(1 - p_value, n_learners, np.inf) / np.sqrt(2)
    return float(q_alpha * np.sqrt(n_learners * (n_learners + 1) / (6.0 * n_tasks)))


def bonferroni_dunn_critical_difference(n_learners: int, n_tasks: int, p_value: float = 0.05) -> float:
    """Critical difference of mean ranks for the Bonferroni-Dunn test against one baseline."""
    q_alpha = stats.norm.ppf(1 - p_value / (2 * (n_learners - 1)))
    return float(q_alpha * np.sqrt(n_learners * (n_learners + 1) / (6.0 * n_tasks)))


def friedman_posthoc_test_bmr(
    bmr: BenchmarkResult,
    measure=None,
    p_value: float = 0.05,
    aggregation: str = "default",
) -> FriedmanPosthocResult:
    """
    Nemenyi post-hoc test after a significant Friedman test.

    If the Friedman test does not reject its null hypothesis at p_value, a
    warning is issued and only the overall result is returned.

    Args:
        bmr: Benchmark result.
        measure: Measure or measure id.
        p_value: Significance level.
        aggregation: 'default' or 'mean', see get_aggr_matrix().

    Returns:
        FriedmanPosthocResult with pairwise p-values (learner x learner).
    """
    if not 0 < p_value < 1:
        raise ValueError(f"p_value must be in (0, 1), got {p_value}")

    measure = bmr.get_measure(measure)
    friedman = friedman_test_bmr(bmr, measure, aggregation=aggregation)
    ranks = convert_bmr_to_rank_matrix(bmr, measure, aggregation=aggregation)
    mean_ranks = ranks.mean(axis=1)

    if not friedman.p_value < p_value:
        warnings.warn(
            f"Cannot reject null hypothesis of overall Friedman test (p = {friedman.p_value:.4g}), "
            "returning overall Friedman test.",
            UserWarning,
            stacklevel=2,
        )
        return FriedmanPosthocResult(
            friedman=friedman,
            f_rejnull=False,
            p_value_threshold=p_value,
            mean_ranks=mean_ranks,
        )

    k, n = friedman.n_learners, friedman.n_tasks
    se = np.sqrt(k * (k + 1) / (6.0 * n))
    learners = list(mean_ranks.index)
    p_values = pd.DataFrame(np.nan, index=learners, columns=learners)
    for i, a in enumerate(learners):
        for b in learners[i + 1:]:
            q = abs(mean_ranks[a] - mean_ranks[b]) / se
            p = float(stats.studentized_range.sf(q * np.sqrt(2), k, np.inf))
            p_values.loc[a, b] = p_values.loc[b, a] = min(p, 1.0)

    return FriedmanPosthocResult(
        friedman=friedman,
        f_rejnull=True,
        p_value_threshold=p_value,
        mean_ranks=mean_ranks,
        p_values=p_values,
        critical_difference=nemenyi_critical_difference(k, n, p_value),
    )
