"""
Data for critical-differences diagrams.

Learners are placed on an axis of mean ranks. A bar of the length of the
critical difference (CD) marks which learners do not differ significantly,
either from a baseline (Bonferroni-Dunn) or from each other (Nemenyi).
"""
import warnings
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from ..results.benchmark_result import BenchmarkResult
from .ranks import convert_bmr_to_rank_matrix
from .stats import (
    FriedmanPosthocResult,
    bonferroni_dunn_critical_difference,
    friedman_posthoc_test_bmr,
    nemenyi_critical_difference,
)


CD_TESTS = ("bd", "nemenyi")

# Height of the CD bar above the rank axis
CD_BAR_Y = 0.1


@dataclass
class CritDifferencesData:
    """
    Everything plot_crit_differences() needs.

    Attributes:
        data: One row per learner with learner_id, short_name, mean_rank,
            rank, right, xend and yend (label anchor positions).
        cd_info: Dict with test, cd, x, y, p_value and, for Nemenyi, cliques
            (DataFrame with xstart, xend, y).
        friedman_nemenyi_test: Result of the Friedman/Nemenyi tests.
        baseline: Baseline learner id (Bonferroni-Dunn only).
    """
    data: pd.DataFrame
    cd_info: Dict[str, Any]
    friedman_nemenyi_test: FriedmanPosthocResult
    baseline: Optional[str] = None

    @property
    def measure_id(self) -> str:
        return self.friedman_nemenyi_test.friedman.measure_id


def find_cliques(mean_ranks: pd.Series, cd: float) -> List[List[str]]:
    """
    Maximal groups of learners whose mean ranks lie within cd of each other.

    Groups of a single learner are omitted.
    """
    ordered = mean_ranks.sort_values(kind='mergesort')
    ids = list(ordered.index)
    values = ordered.to_numpy()
    cliques: List[List[str]] = []
    last_end = -1
    for i in range(len(ids)):
        end = i
        while end + 1 < len(ids) and values[end + 1] - values[i] <= cd:
            end += 1
        # a group ending where the previous one ended is contained in it
        if end > i and end > last_end:
            cliques.append(ids[i:end + 1])
            last_end = end
    return cliques


def generate_crit_differences_data(
    bmr: BenchmarkResult,
    measure=None,
    p_value: float = 0.05,
    baseline: Optional[str] = None,
    test: str = "bd",
) -> CritDifferencesData:
    """
    Compute mean ranks, critical difference and label positions.

    Args:
        bmr: Benchmark result with at least 2 learners and 2 tasks.
        measure: Measure or measure id (default: first measure of bmr).
        p_value: Significance level.
        baseline: Learner id to compare against ('bd' only). Defaults to the
            learner with the best mean rank.
        test: 'bd' (Bonferroni-Dunn) or 'nemenyi'.

    Returns:
        CritDifferencesData.
    """
    if test not in CD_TESTS:
        raise ValueError(f"test must be one of {CD_TESTS}, got '{test}'")

    measure = bmr.get_measure(measure)
    learner_ids = bmr.get_learner_ids()
    if baseline is not None and baseline not in learner_ids:
        raise ValueError(f"Baseline '{baseline}' is not a learner of the benchmark result: {learner_ids}")

    # The diagram is drawn whatever the outcome of the overall test
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        posthoc = friedman_posthoc_test_bmr(bmr, measure, p_value=p_value)

    ranks = convert_bmr_to_rank_matrix(bmr, measure)
    mean_ranks = ranks.mean(axis=1)
    k = len(mean_ranks)
    n = ranks.shape[1]

    short_names = dict(zip(learner_ids, bmr.get_learner_short_names()))
    df = pd.DataFrame({
        'learner_id': mean_ranks.index.astype(str),
        'short_name': [short_names[lid] for lid in mean_ranks.index],
        'mean_rank': mean_ranks.to_numpy(),
    })
    df['rank'] = df['mean_rank'].rank(method='first').astype(int)
    df['right'] = df['rank'] > k / 2
    df['xend'] = np.where(df['right'], k + 1, 0)
    df['yend'] = np.where(df['right'], k - df['rank'] + 0.5, df['rank'] - 0.5)
    df = df.sort_values('rank').reset_index(drop=True)

    cd_info: Dict[str, Any] = {'test': test, 'p_value': p_value, 'y': CD_BAR_Y}
    if test == "bd":
        if baseline is None:
            baseline = str(df.loc[0, 'learner_id'])
        cd = bonferroni_dunn_critical_difference(k, n, p_value)
        cd_info['cd'] = cd
        cd_info['x'] = float(mean_ranks[baseline])
    else:
        baseline = None
        cd = nemenyi_critical_difference(k, n, p_value)
        cd_info['cd'] = cd
        cd_info['x'] = float(df['mean_rank'].min())
        cliques = find_cliques(mean_ranks, cd)
        cd_info['cliques'] = pd.DataFrame({
            'learners': cliques,
            'xstart': [float(mean_ranks[c].min()) for c in cliques],
            'xend': [float(mean_ranks[c].max()) for c in cliques],
            'y': [CD_BAR_Y * (i + 2) for i in range(len(cliques))],
        })

    return CritDifferencesData(
        data=df,
        cd_info=cd_info,
        friedman_nemenyi_test=posthoc,
        baseline=baseline,
    )
