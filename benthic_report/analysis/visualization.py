"""
Visualization functions for classifier reports.
"""
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
import plotly.graph_objects as go
from matplotlib.colors import LinearSegmentedColormap
from plotly.subplots import make_subplots
from pathlib import Path
from typing import Optional, List, Tuple

from .confusion import confusion_to_matrix
from .reshape import OVERALL, METRIC_COLUMNS


METRIC_TITLES = {
    'precision': 'Precision',
    'recall': 'Recall',
    'f1': 'F1',
}

SCORE_TICKS = [0, 0.25, 0.5, 0.75, 1]

DEFAULT_HEATMAP_COLORS = ['#f7fbff', '#6baed6', '#08306b']


def _bar_facets(
    metrics_long: pd.DataFrame,
    label_order: List[str],
    category_order: List[str]
) -> List[Tuple[str, List[str]]]:
    """
    Facets (Overall, then categories) with their labels, best F1 first.

    Labels without a resolved name or category cannot be placed in a
    facet and are skipped.
    """
    data = metrics_long.dropna(subset=['label', 'tlc'])
    rank = {label: i for i, label in enumerate(label_order)}

    facets = []
    for facet in [OVERALL] + list(category_order):
        labels = data.loc[data['tlc'] == facet, 'label'].unique().tolist()
        if not labels:
            continue
        labels = sorted(labels, key=lambda label: rank.get(label, len(rank)), reverse=True)
        facets.append((facet, labels))
    return facets


def _auto_bar_figsize(facets: List[Tuple[str, List[str]]]) -> Tuple[float, float]:
    n_rows = sum(len(labels) for _, labels in facets)
    return (12, max(4, 0.3 * n_rows + 1.5 * len(facets)))


def plot_metric_bars(
    metrics_long: pd.DataFrame,
    label_order: List[str],
    category_order: List[str],
    save_path: Path,
    title: str = "Classifier Performance",
    figsize: Optional[Tuple[float, float]] = None,
    dpi: int = 300
) -> None:
    """
    Plot faceted horizontal bar charts of precision, recall and F1.

    One row of panels for Overall and one per top-level category, one
    column per metric. Within a panel the best F1 is on top.

    Parameters
    ----------
    metrics_long : pd.DataFrame
        Long-format metrics from reshape_metrics
    label_order : List[str]
        Labels by ascending F1
    category_order : List[str]
        Top-level categories by descending best F1
    save_path : Path
        Path to save figure
    title : str
        Plot title
    figsize : Optional[Tuple[float, float]]
        Figure size; derived from the number of labels when None
    dpi : int
        Resolution of the saved image
    """
    facets = _bar_facets(metrics_long, label_order, category_order)
    if not facets:
        raise ValueError("No labels with a resolved category to plot")

    if figsize is None:
        figsize = _auto_bar_figsize(facets)

    palette = sns.color_palette("viridis", len(METRIC_COLUMNS))
    fig, axes = plt.subplots(
        len(facets),
        len(METRIC_COLUMNS),
        figsize=figsize,
        sharex=True,
        squeeze=False,
        gridspec_kw={'height_ratios': [len(labels) for _, labels in facets]},
    )

    for i, (facet, labels) in enumerate(facets):
        facet_data = metrics_long[metrics_long['tlc'] == facet]
        for j, metric in enumerate(METRIC_COLUMNS):
            ax = axes[i][j]
            subset = facet_data[facet_data['metric'] == metric]
            scores = subset.groupby('label')['value'].mean().reindex(labels)

            ax.barh(np.arange(len(labels)), scores.fillna(0).values, color=palette[j])
            ax.set_yticks(np.arange(len(labels)))
            if j == 0:
                ax.set_yticklabels(labels, fontsize=8)
            else:
                ax.tick_params(labelleft=False)
            ax.invert_yaxis()

            ax.set_xlim(0, 1)
            ax.set_xticks(SCORE_TICKS)
            ax.grid(axis='x', color='#dddddd')
            ax.set_axisbelow(True)
            sns.despine(ax=ax, left=True)

            if i == 0:
                ax.set_title(METRIC_TITLES[metric], fontsize=12)
            if j == 0:
                ax.set_ylabel(facet, fontsize=10, rotation=0, ha='right', va='center')

    fig.suptitle(title, fontsize=14)
    fig.tight_layout()

    save_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(save_path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)


def plot_metric_bars_interactive(
    metrics_long: pd.DataFrame,
    label_order: List[str],
    category_order: List[str],
    save_path: Path,
    title: str = "Classifier Performance"
) -> None:
    """
    Interactive version of plot_metric_bars as a self-contained HTML file.

    Parameters
    ----------
    metrics_long : pd.DataFrame
        Long-format metrics from reshape_metrics
    label_order : List[str]
        Labels by ascending F1
    category_order : List[str]
        Top-level categories by descending best F1
    save_path : Path
        Path of the HTML file
    title : str
        Plot title
    """
    facets = _bar_facets(metrics_long, label_order, category_order)
    if not facets:
        raise ValueError("No labels with a resolved category to plot")

    n_rows = sum(len(labels) for _, labels in facets)
    fig = make_subplots(
        rows=len(facets),
        cols=len(METRIC_COLUMNS),
        shared_xaxes=True,
        shared_yaxes=True,
        row_heights=[len(labels) / n_rows for _, labels in facets],
        column_titles=[METRIC_TITLES[m] for m in METRIC_COLUMNS],
        row_titles=[facet for facet, _ in facets],
        vertical_spacing=0.02,
        horizontal_spacing=0.02,
    )

    palette = ['#440154', '#21918c', '#fde725']
    for i, (facet, labels) in enumerate(facets, start=1):
        facet_data = metrics_long[metrics_long['tlc'] == facet]
        for j, metric in enumerate(METRIC_COLUMNS, start=1):
            subset = facet_data[facet_data['metric'] == metric]
            scores = subset.groupby('label')['value'].mean().reindex(labels)
            fig.add_trace(
                go.Bar(
                    x=scores.values,
                    y=labels,
                    orientation='h',
                    marker_color=palette[j - 1],
                    name=METRIC_TITLES[metric],
                    showlegend=False,
                    hovertemplate="%{y}<br>" + METRIC_TITLES[metric] + ": %{x:.3f}<extra></extra>",
                ),
                row=i,
                col=j,
            )
            fig.update_yaxes(
                categoryorder='array', categoryarray=list(reversed(labels)), row=i, col=j
            )

    fig.update_xaxes(range=[0, 1], tickvals=SCORE_TICKS, showgrid=True, gridcolor='#dddddd')
    fig.update_layout(
        title=title,
        template="plotly_white",
        height=200 + 22 * n_rows,
        margin=dict(l=220, r=120, t=80, b=40),
    )

    _write_html(fig, save_path, div_id="metric-bars")


def plot_confusion_heatmap(
    cells: pd.DataFrame,
    row_field: str,
    col_field: str,
    save_path: Path,
    title: str = "Confusion Matrix",
    figsize: Tuple[int, int] = (14, 12),
    colors: Optional[List[str]] = None,
    dpi: int = 300
) -> None:
    """
    Plot a confusion matrix of counts.

    Parameters
    ----------
    cells : pd.DataFrame
        Dense confusion cells from build_confusion_matrix
    row_field : str
        Field on the rows (user label)
    col_field : str
        Field on the columns (classifier label)
    save_path : Path
        Path to save figure
    title : str
        Plot title
    figsize : Tuple[int, int]
        Figure size
    colors : Optional[List[str]]
        Low, middle and high colors of the gradient
    dpi : int
        Resolution of the saved image
    """
    matrix = confusion_to_matrix(cells, row_field, col_field)
    cmap = LinearSegmentedColormap.from_list(
        "confusion", colors or DEFAULT_HEATMAP_COLORS
    )

    plt.figure(figsize=figsize)
    sns.heatmap(
        matrix,
        annot=True,
        fmt="d",
        cmap=cmap,
        cbar_kws={"label": "Count"},
        vmin=0,
        linewidths=0.5,
        linecolor='white',
        annot_kws={"fontsize": 7},
    )
    plt.title(title, fontsize=14, pad=20)
    plt.ylabel("User label", fontsize=12)
    plt.xlabel("Classifier label", fontsize=12)
    plt.xticks(rotation=45, ha='right')
    plt.yticks(rotation=0)
    plt.tight_layout()

    save_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(save_path, dpi=dpi, bbox_inches='tight')
    plt.close()


def plot_confusion_heatmap_interactive(
    cells: pd.DataFrame,
    row_field: str,
    col_field: str,
    save_path: Path,
    title: str = "Confusion Matrix",
    colors: Optional[List[str]] = None
) -> None:
    """Interactive confusion matrix as a self-contained HTML file."""
    matrix = confusion_to_matrix(cells, row_field, col_field)
    colors = colors or DEFAULT_HEATMAP_COLORS

    fig = go.Figure(
        data=go.Heatmap(
            z=matrix.values,
            x=list(matrix.columns),
            y=list(matrix.index),
            colorscale=[[0.0, colors[0]], [0.5, colors[1]], [1.0, colors[2]]],
            zmin=0,
            colorbar=dict(title="Count"),
            hovertemplate="User: %{y}<br>Classifier: %{x}<br>Count: %{z}<extra></extra>",
        )
    )
    fig.update_xaxes(title="Classifier label", tickangle=-45)
    fig.update_yaxes(title="User label", autorange='reversed')
    fig.update_layout(
        title=title,
        template="plotly_white",
        height=320 + 18 * len(matrix.index),
        width=320 + 18 * len(matrix.columns),
        margin=dict(l=160, r=40, t=80, b=160),
    )

    _write_html(fig, save_path, div_id=save_path.stem.replace('_', '-'))


def _write_html(fig: go.Figure, save_path: Path, div_id: str) -> None:
    # A fixed div id keeps reruns byte-identical
    save_path.parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(
        str(save_path),
        include_plotlyjs=True,
        full_html=True,
        div_id=div_id,
        config={"displaylogo": False},
    )
