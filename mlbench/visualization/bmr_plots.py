"""
Plots of benchmark results.

Provides:
- Box/violin plots of per-iteration performance, one facet per task
- Dot plot of aggregated performance per task
- Bar chart of how often each learner reached each rank
"""
import math
from typing import Dict, List, Optional

import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns

from ..analysis.ranks import convert_bmr_to_rank_matrix, get_aggr_matrix
from ..results.benchmark_result import BenchmarkResult


BAR_POSITIONS = ("stack", "dodge", "fill")


def _learner_labels(bmr: BenchmarkResult, pretty_names: bool) -> Dict[str, str]:
    """Map learner ids to the labels shown in plots."""
    ids = bmr.get_learner_ids()
    if not pretty_names:
        return {lid: lid for lid in ids}
    labels = dict(zip(ids, bmr.get_learner_short_names()))
    # Short names must stay distinguishable
    if len(set(labels.values())) < len(labels):
        return {lid: lid for lid in ids}
    return labels


def _check_order(order: Optional[List[str]], available: List[str], kind: str) -> List[str]:
    if order is None:
        return list(available)
    unknown = [o for o in order if o not in available]
    if unknown:
        raise ValueError(f"Unknown {kind} ids in order: {unknown}. Available: {available}")
    return list(order)


def plot_bmr_boxplots(
    bmr: BenchmarkResult,
    measure=None,
    style: str = "box",
    order_lrns: Optional[List[str]] = None,
    order_tsks: Optional[List[str]] = None,
    pretty_names: bool = True,
    facet_nrow: Optional[int] = None,
) -> plt.Figure:
    """
    Box or violin plots of per-iteration performance.

    Args:
        bmr: Benchmark result.
        measure: Measure or measure id (default: first measure of bmr).
        style: 'box' or 'violin'.
        order_lrns: Learner ids in plotting order.
        order_tsks: Task ids in facet order (also selects tasks).
        pretty_names: Label learners by short name.
        facet_nrow: Number of facet rows.

    Returns:
        matplotlib Figure.
    """
    if style not in ("box", "violin"):
        raise ValueError(f"style must be 'box' or 'violin', got '{style}'")

    measure = bmr.get_measure(measure)
    order_lrns = _check_order(order_lrns, bmr.get_learner_ids(), "learner")
    order_tsks = _check_order(order_tsks, bmr.get_task_ids(), "task")
    labels = _learner_labels(bmr, pretty_names)

    df = bmr.get_performances(task_ids=order_tsks, learner_ids=order_lrns, as_df=True)
    df = df.astype({'task_id': str, 'learner_id': str})
    df['learner'] = df['learner_id'].map(labels)

    ncol = len(order_tsks) if facet_nrow is None else math.ceil(len(order_tsks) / facet_nrow)
    g = sns.catplot(
        data=df,
        x='learner', y=measure.id,
        col='task_id', col_order=order_tsks, col_wrap=ncol if ncol < len(order_tsks) else None,
        kind=style,
        order=[labels[lid] for lid in order_lrns],
        height=3.5, aspect=1.0,
        sharey=True,
    )
    g.set_titles("{col_name}")
    g.set_axis_labels("", measure.id)
    for ax in g.axes.flat:
        ax.tick_params(axis='x', labelrotation=45)
        ax.grid(True, axis='y', alpha=0.3)
    return g.figure


def plot_bmr_summary(
    bmr: BenchmarkResult,
    measure=None,
    trafo: str = "none",
    order_tsks: Optional[List[str]] = None,
    pretty_names: bool = True,
    jitter: float = 0.05,
) -> plt.Figure:
    """
    Dot plot of aggregated performance, one row per task, colored by learner.

    Args:
        bmr: Benchmark result.
        measure: Measure or measure id.
        trafo: 'none' plots the aggregated value, 'rank' the rank per task.
        order_tsks: Task ids in plotting order (also selects tasks).
        pretty_names: Label learners by short name.
        jitter: Vertical jitter of the dots.

    Returns:
        matplotlib Figure.
    """
    if trafo not in ("none", "rank"):
        raise ValueError(f"trafo must be 'none' or 'rank', got '{trafo}'")

    measure = bmr.get_measure(measure)
    order_tsks = _check_order(order_tsks, bmr.get_task_ids(), "task")
    labels = _learner_labels(bmr, pretty_names)

    if trafo == "rank":
        mat = convert_bmr_to_rank_matrix(bmr, measure)
        xlabel = f"rank of {measure.aggr_id}"
    else:
        mat = get_aggr_matrix(bmr, measure)
        xlabel = measure.aggr_id
    df = mat.stack().rename('value').reset_index()
    df.columns = ['learner_id', 'task_id', 'value']
    df = df[df['task_id'].isin(order_tsks)]
    df['learner'] = df['learner_id'].map(labels)

    fig, ax = plt.subplots(figsize=(8, 0.6 * len(order_tsks) + 2))
    sns.stripplot(
        data=df, x='value', y='task_id', hue='learner',
        order=order_tsks,
        hue_order=[labels[lid] for lid in bmr.get_learner_ids()],
        jitter=jitter, size=7, ax=ax,
    )
    ax.set_xlabel(xlabel)
    ax.set_ylabel("")
    ax.grid(True, axis='x', alpha=0.3)
    ax.legend(title="learner", loc='center left', bbox_to_anchor=(1.0, 0.5), fontsize=8)
    fig.tight_layout()
    return fig


def plot_bmr_ranks_as_barplot(
    bmr: BenchmarkResult,
    measure=None,
    ties_method: str = "average",
    pos: str = "stack",
    order_lrns: Optional[List[str]] = None,
    order_tsks: Optional[List[str]] = None,
    pretty_names: bool = True,
) -> plt.Figure:
    """
    Bar chart of rank frequencies.

    For every rank the bar shows on how many tasks each learner reached it.

    Args:
        bmr: Benchmark result.
        measure: Measure or measure id.
        ties_method: Passed to convert_bmr_to_rank_matrix().
        pos: 'stack', 'dodge' (side by side) or 'fill' (stacked proportions).
        order_lrns: Learner ids in legend order.
        order_tsks: Tasks to count.
        pretty_names: Label learners by short name.

    Returns:
        matplotlib Figure.
    """
    if pos not in BAR_POSITIONS:
        raise ValueError(f"pos must be one of {BAR_POSITIONS}, got '{pos}'")

    measure = bmr.get_measure(measure)
    order_lrns = _check_order(order_lrns, bmr.get_learner_ids(), "learner")
    order_tsks = _check_order(order_tsks, bmr.get_task_ids(), "task")
    labels = _learner_labels(bmr, pretty_names)

    ranks = convert_bmr_to_rank_matrix(bmr, measure, ties_method=ties_method)[order_tsks]
    long = ranks.stack().rename('rank').reset_index()
    long.columns = ['learner_id', 'task_id', 'rank']
    counts = pd.crosstab(long['rank'], long['learner_id'])
    counts = counts.reindex(columns=order_lrns, fill_value=0)
    counts.columns = [labels[lid] for lid in order_lrns]
    counts.index = [f"{r:g}" for r in counts.index]

    if pos == "fill":
        counts = counts.div(counts.sum(axis=1), axis=0)

    fig, ax = plt.subplots(figsize=(8, 5))
    counts.plot(kind='bar', stacked=pos != "dodge", ax=ax, width=0.8)
    ax.set_xlabel("rank")
    ax.set_ylabel("proportion" if pos == "fill" else "count")
    ax.tick_params(axis='x', labelrotation=0)
    ax.set_title(f"Ranks of {measure.aggr_id} on {len(order_tsks)} tasks")
    ax.legend(title="learner", loc='center left', bbox_to_anchor=(1.0, 0.5), fontsize=8)
    ax.grid(True, axis='y', alpha=0.3)
    fig.tight_layout()
    return fig
