"""
Analysis of benchmark results.

Provides:
- convert_bmr_to_rank_matrix: Per-task ranks of all learners
- friedman_test_bmr / friedman_posthoc_test_bmr: Friedman and Nemenyi tests
- generate_crit_differences_data: Data for critical-differences diagrams
- generate_thresh_vs_perf_data: Performance over decision thresholds
"""

from .ranks import convert_bmr_to_rank_matrix, get_aggr_matrix
from .stats import (
    FriedmanTestResult,
    FriedmanPosthocResult,
    friedman_test_bmr,
    friedman_posthoc_test_bmr,
    nemenyi_critical_difference,
    bonferroni_dunn_critical_difference,
)
from .crit_differences import CritDifferencesData, generate_crit_differences_data, find_cliques
from .thresholds import ThreshVsPerfData, generate_thresh_vs_perf_data

__all__ = [
    'convert_bmr_to_rank_matrix',
    'get_aggr_matrix',
    'FriedmanTestResult',
    'FriedmanPosthocResult',
    'friedman_test_bmr',
    'friedman_posthoc_test_bmr',
    'nemenyi_critical_difference',
    'bonferroni_dunn_critical_difference',
    'CritDifferencesData',
    'generate_crit_differences_data',
    'find_cliques',
    'ThreshVsPerfData',
    'generate_thresh_vs_perf_data',
]
