"""
Critical-differences diagram.
"""
import matplotlib.pyplot as plt

from ..analysis.crit_differences import CritDifferencesData


def plot_crit_differences(cd_data: CritDifferencesData, pretty_names: bool = True) -> plt.Figure:
    """
    Draw a critical-differences diagram.

    Learners are marked on the mean-rank axis and labeled on the left
    (better half) or right side. The CD bar is drawn around the baseline
    for Bonferroni-Dunn, or at the left for Nemenyi together with thick
    lines joining cliques of learners that do not differ significantly.

    Args:
        cd_data: Output of generate_crit_differences_data().
        pretty_names: Label learners by short name.

    Returns:
        matplotlib Figure.
    """
    df = cd_data.data
    info = cd_data.cd_info
    k = len(df)
    label_col = 'short_name' if pretty_names and df['short_name'].is_unique else 'learner_id'

    fig, ax = plt.subplots(figsize=(9, 1.5 + 0.4 * k))

    # Rank axis with integer ticks
    ax.hlines(0, 1, k, color='k', linewidth=1)
    for r in range(1, k + 1):
        ax.vlines(r, 0, 0.05, color='k', linewidth=1)
        ax.text(r, 0.08, str(r), ha='center', va='bottom', fontsize=9)

    # Learner markers and labels
    for _, row in df.iterrows():
        y = -row['yend'] * 0.4
        ax.plot(row['mean_rank'], 0, 'o', color='k', markersize=4, zorder=3)
        ax.plot([row['mean_rank'], row['mean_rank'], row['xend']], [0, y, y], color='k', linewidth=0.8)
        ha = 'left' if row['right'] else 'right'
        offset = 0.05 if row['right'] else -0.05
        ax.text(row['xend'] + offset, y, f"{row[label_col]} ({row['mean_rank']:.2f})",
                ha=ha, va='center', fontsize=9)

    # CD bar
    cd = info['cd']
    bar_y = 0.35
    if info['test'] == "bd":
        x = info['x']
        ax.hlines(bar_y, x - cd, x + cd, color='tab:red', linewidth=2)
        ax.vlines([x - cd, x + cd], bar_y - 0.05, bar_y + 0.05, color='tab:red', linewidth=2)
        ax.plot(x, bar_y, 'o', color='tab:red', markersize=5)
        title = f"Bonferroni-Dunn test, baseline: {cd_data.baseline}"
    else:
        x = info['x']
        ax.hlines(bar_y, x, x + cd, color='tab:red', linewidth=2)
        ax.vlines([x, x + cd], bar_y - 0.05, bar_y + 0.05, color='tab:red', linewidth=2)
        for _, clique in info['cliques'].iterrows():
            ax.hlines(-clique['y'], clique['xstart'] - 0.03, clique['xend'] + 0.03,
                      color='tab:blue', linewidth=3)
        title = "Nemenyi test"
    ax.text(x, bar_y + 0.08, f"CD = {cd:.3f}", ha='left', va='bottom', fontsize=9, color='tab:red')

    ax.set_title(f"{title} ({cd_data.measure_id}, p = {info['p_value']})", fontsize=10)
    ax.set_xlim(-1.5, k + 2.5)
    ax.set_ylim(-(k / 2 + 1) * 0.4, 0.7)
    ax.axis('off')
    fig.tight_layout()
    return fig
