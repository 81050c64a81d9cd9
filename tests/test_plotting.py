"""Smoke tests for plotting utilities on the synthetic data."""

import matplotlib.pyplot as plt
import plotly.graph_objects as go
import pytest

from wle_tlbx.analysis.kmeans_baseline import KMeansBaseline
from wle_tlbx.analysis.model_registry import ModelRegistry
from wle_tlbx.data.views import DatasetView
from wle_tlbx.plotting.clustering_plots import plot_cluster_composition
from wle_tlbx.plotting.evaluation_plots import (
    plot_confusion_matrix,
    plot_confusion_matrix_plotly,
    plot_model_comparison,
)
from wle_tlbx.utils.plotting_config import PlottingConfig


@pytest.fixture
def registry(filtered_split, small_grids) -> ModelRegistry:
    train_view, test_view, _ = filtered_split
    registry = ModelRegistry(random_state=300, rf_n_estimators=10)
    for method in ("gradient_boosting", "random_forest"):
        registry.fit(train_view, method=method, param_grid=small_grids[method])
        registry.evaluate_on(method, test_view)
    return registry


def test_correlation_plots(filtered_split) -> None:
    """Heatmap and top-pairs plots render from the filter result."""
    _, _, filt = filtered_split
    heat_fig = filt.plot_heatmap(figsize=(6, 6))
    pos_fig, neg_fig = filt.plot_top_pairs(n=5, figsize=(6, 4))

    for fig in (heat_fig, pos_fig, neg_fig):
        assert fig.axes
        plt.close(fig)


def test_class_distribution_plot(wle_dataset) -> None:
    fig = wle_dataset.split(seed=300).plot_class_distribution(figsize=(6, 4))
    assert len(fig.axes) == 1
    plt.close(fig)


def test_cluster_composition_plots(filtered_split) -> None:
    """Both bar charts compare the cluster assignment against the labels."""
    train_view, _, _ = filtered_split
    clustering = KMeansBaseline(train_view, n_clusters=5, random_state=300).fit().result()

    by_cluster = clustering.plot_cluster_composition()
    by_label = clustering.plot_label_composition()

    assert by_cluster.axes[0].get_xlabel() == "k-means cluster"
    assert by_label.axes[0].get_xlabel() == "classe"
    plt.close(by_cluster)
    plt.close(by_label)


def test_cluster_plot_requires_labels(filtered_split) -> None:
    train_view, _, _ = filtered_split
    unlabeled = DatasetView(df=train_view.features, pretty_by_col={}, numeric_cols=train_view.numeric_cols)
    clustering = KMeansBaseline(unlabeled, n_clusters=3, random_state=0).fit().result()
    with pytest.raises(ValueError, match="no labels"):
        plot_cluster_composition(clustering)


def test_evaluation_plots(registry: ModelRegistry) -> None:
    evaluation = registry.get("random_forest").evaluation

    fig = plot_confusion_matrix(evaluation)
    norm_fig = plot_confusion_matrix(evaluation, normalize=True)
    interactive = plot_confusion_matrix_plotly(evaluation)
    comparison_fig = plot_model_comparison(registry.compare())

    assert isinstance(interactive, go.Figure)
    assert "accuracy" in fig.axes[0].get_title()
    for f in (fig, norm_fig, comparison_fig):
        plt.close(f)


def test_plotting_config_context_restores_rcparams() -> None:
    before = plt.rcParams["axes.titlesize"]
    with PlottingConfig(title_size=31).apply():
        assert plt.rcParams["axes.titlesize"] == 31
    assert plt.rcParams["axes.titlesize"] == before


def test_label_colors_stable() -> None:
    colors = PlottingConfig().label_colors(["A", "B", "C", "D", "E"])
    assert list(colors) == ["A", "B", "C", "D", "E"]
    assert len(set(colors.values())) == 5
