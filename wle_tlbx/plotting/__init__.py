"""Plotting utilities for data visualization."""

from .clustering_plots import plot_cluster_composition, plot_label_composition
from .correlation_plots import plot_correlation_heatmap, plot_top_correlated_pairs
from .dataset_plots import plot_class_distribution
from .evaluation_plots import plot_confusion_matrix, plot_confusion_matrix_plotly, plot_model_comparison


__all__ = [
    "plot_class_distribution",
    "plot_cluster_composition",
    "plot_confusion_matrix",
    "plot_confusion_matrix_plotly",
    "plot_correlation_heatmap",
    "plot_label_composition",
    "plot_model_comparison",
    "plot_top_correlated_pairs",
]
