"""
Saving figures and writing the standard set of plots for a run.
"""
from pathlib import Path
from typing import List, Optional

import matplotlib.pyplot as plt

from ..analysis.crit_differences import generate_crit_differences_data
from ..analysis.thresholds import generate_thresh_vs_perf_data
from ..results.benchmark_result import BenchmarkResult
from .bmr_plots import plot_bmr_boxplots, plot_bmr_ranks_as_barplot, plot_bmr_summary
from .crit_diff_plots import plot_crit_differences
from .roc_plots import plot_roc_curves


def save_figure(fig: plt.Figure, path) -> Path:
    """Save a figure (format from the file suffix) and close it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, bbox_inches='tight', dpi=150)
    plt.close(fig)
    return path


def plot_benchmark_result(
    bmr: BenchmarkResult,
    output_dir,
    measure=None,
    p_value: float = 0.05,
    fmt: str = "pdf",
) -> List[Path]:
    """
    Write all standard plots of a benchmark result to output_dir.

    Plots that need more than the result offers (at least two learners and
    tasks for ranks, probability predictions for ROC curves) are skipped.

    Returns:
        Paths of the saved figures.
    """
    output_dir = Path(output_dir)
    measure = bmr.get_measure(measure)
    mid = measure.id
    saved = []

    saved.append(save_figure(plot_bmr_boxplots(bmr, measure), output_dir / f"boxplots_{mid}.{fmt}"))
    saved.append(save_figure(plot_bmr_summary(bmr, measure), output_dir / f"summary_{mid}.{fmt}"))

    n_learners, n_tasks = len(bmr.get_learner_ids()), len(bmr.get_task_ids())
    if n_learners >= 2:
        fig = plot_bmr_ranks_as_barplot(bmr, measure)
        saved.append(save_figure(fig, output_dir / f"ranks_{mid}.{fmt}"))
    if n_learners >= 2 and n_tasks >= 2:
        cd_path = _plot_crit_differences_or_skip(bmr, measure, p_value, output_dir / f"crit_differences_{mid}.{fmt}")
        if cd_path is not None:
            saved.append(cd_path)

    roc_path = _plot_roc_or_skip(bmr, output_dir / f"roc_curves.{fmt}")
    if roc_path is not None:
        saved.append(roc_path)
    return saved


def _plot_crit_differences_or_skip(bmr, measure, p_value, path) -> Optional[Path]:
    try:
        cd_data = generate_crit_differences_data(bmr, measure, p_value=p_value)
    except ValueError as e:
        print(f"  Skipping critical differences plot: {e}")
        return None
    return save_figure(plot_crit_differences(cd_data), path)


def _plot_roc_or_skip(bmr, path) -> Optional[Path]:
    try:
        thresh_data = generate_thresh_vs_perf_data(bmr)
    except ValueError as e:
        print(f"  Skipping ROC curves: {e}")
        return None
    return save_figure(plot_roc_curves(thresh_data), path)
