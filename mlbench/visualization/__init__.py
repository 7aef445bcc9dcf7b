"""Visualization of benchmark results."""
from .bmr_plots import plot_bmr_boxplots, plot_bmr_summary, plot_bmr_ranks_as_barplot
from .crit_diff_plots import plot_crit_differences
from .roc_plots import plot_roc_curves
from .report import save_figure, plot_benchmark_result

__all__ = [
    'plot_bmr_boxplots',
    'plot_bmr_summary',
    'plot_bmr_ranks_as_barplot',
    'plot_crit_differences',
    'plot_roc_curves',
    'save_figure',
    'plot_benchmark_result',
]
