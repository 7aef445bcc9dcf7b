"""
ROC curves and other threshold-versus-performance plots.
"""
import matplotlib.pyplot as plt
import seaborn as sns

from ..analysis.thresholds import ThreshVsPerfData


def plot_roc_curves(thresh_data: ThreshVsPerfData, facet_learner: bool = False) -> plt.Figure:
    """
    Plot the first two measures of a threshold sweep against each other.

    With the default measures ('fpr', 'tpr') this gives ROC curves.

    Args:
        thresh_data: Output of generate_thresh_vs_perf_data() with at least
            two measures.
        facet_learner: One facet per learner (colored by task) instead of one
            facet per task (colored by learner).

    Returns:
        matplotlib Figure.
    """
    ids = thresh_data.measure_ids
    if len(ids) < 2:
        raise ValueError(f"Need at least two measures to plot curves, got {ids}")
    x, y = ids[0], ids[1]

    df = thresh_data.data.astype({'task_id': str, 'learner_id': str})
    facet, hue = ('learner_id', 'task_id') if facet_learner else ('task_id', 'learner_id')

    g = sns.relplot(
        data=df,
        x=x, y=y,
        hue=hue, col=facet,
        kind='line', sort=False, estimator=None,
        height=3.5, aspect=1.0,
    )
    g.set_titles("{col_name}")
    is_roc = (x, y) == ("fpr", "tpr")
    for ax in g.axes.flat:
        if is_roc:
            ax.plot([0, 1], [0, 1], color='gray', linestyle='--', alpha=0.5)
        ax.grid(True, alpha=0.3)
    return g.figure
