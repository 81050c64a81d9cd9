"""Clustering diagnostics: how k-means clusters line up with the exercise classes."""

from __future__ import annotations

import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.figure import Figure

from wle_tlbx.analysis.kmeans_baseline import ClusteringResult
from wle_tlbx.utils.plotting_config import DEFAULT_PLOT_CFG, PlottingConfig


def _require_labels(result: ClusteringResult) -> None:
    if result.labels is None:
        raise ValueError("ClusteringResult has no labels; composition plots need a labelled view.")


def plot_cluster_composition(
    result: ClusteringResult,
    *,
    ax: plt.Axes | None = None,
    plot_cfg: PlottingConfig = DEFAULT_PLOT_CFG,
    figsize: tuple[int, int] = (10, 6),
) -> Figure:
    """Bar chart of cluster sizes, each bar split by the true label.

    A clean separation shows every cluster dominated by a single colour.
    Built with [:func:`seaborn.countplot`](https://seaborn.pydata.org/generated/seaborn.countplot.html).
    """
    _require_labels(result)
    frame = result.assignment_frame()
    categories = [str(c) for c in result.contingency.columns]
    frame["label"] = frame["label"].astype(str)
    frame["cluster"] = frame["cluster"].astype(str)

    if ax is None:
        _, ax = plt.subplots(figsize=figsize)
    sns.countplot(
        data=frame,
        x="cluster",
        hue="label",
        order=[str(k) for k in range(result.n_clusters)],
        hue_order=categories,
        palette=plot_cfg.label_colors(categories),
        ax=ax,
    )
    ax.set_xlabel("k-means cluster")
    ax.set_ylabel("Rows")
    ax.set_title(f"Label Composition of {result.n_clusters} k-means Clusters")
    ax.legend(title="classe")
    ax.figure.tight_layout()
    return ax.figure


def plot_label_composition(
    result: ClusteringResult,
    *,
    ax: plt.Axes | None = None,
    plot_cfg: PlottingConfig = DEFAULT_PLOT_CFG,
    figsize: tuple[int, int] = (10, 6),
) -> Figure:
    """Bar chart of label counts, each bar split by the assigned cluster."""
    _require_labels(result)
    frame = result.assignment_frame()
    categories = [str(c) for c in result.contingency.columns]
    frame["label"] = frame["label"].astype(str)
    frame["cluster"] = frame["cluster"].astype(str)
    clusters = [str(k) for k in range(result.n_clusters)]

    if ax is None:
        _, ax = plt.subplots(figsize=figsize)
    sns.countplot(
        data=frame,
        x="label",
        hue="cluster",
        order=categories,
        hue_order=clusters,
        palette=dict(zip(clusters, plot_cfg.cluster_colors(result.n_clusters), strict=True)),
        ax=ax,
    )
    ax.set_xlabel("classe")
    ax.set_ylabel("Rows")
    ax.set_title("Cluster Assignment per Exercise Class")
    ax.legend(title="cluster")
    ax.figure.tight_layout()
    return ax.figure
