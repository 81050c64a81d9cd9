"""Evaluation visualization: confusion matrices and model comparison."""

import matplotlib.pyplot as plt
import pandas as pd
import plotly.graph_objects as go
import seaborn as sns
from matplotlib.figure import Figure

from wle_tlbx.analysis.evaluator import EvaluationResult


def _row_normalized(cm: pd.DataFrame) -> pd.DataFrame:
    """Share of each reference row; empty rows stay zero."""
    totals = cm.sum(axis=1).replace(0, 1)
    return cm.div(totals, axis=0)


def plot_confusion_matrix(
    result: EvaluationResult,
    *,
    normalize: bool = False,
    ax: plt.Axes | None = None,
    figsize: tuple[int, int] = (7, 6),
) -> Figure:
    """Heatmap of the confusion matrix (reference rows x predicted columns).

    Args:
        result: Output of :class:`~wle_tlbx.analysis.evaluator.Evaluator`.
        normalize: Show row shares (recall per class) instead of counts.
        ax: Optional axes to draw into.
        figsize: Figure size when a new figure is created.
    """
    cm = _row_normalized(result.confusion_matrix) if normalize else result.confusion_matrix
    if ax is None:
        _, ax = plt.subplots(figsize=figsize)

    sns.heatmap(
        cm,
        annot=True,
        fmt=".2f" if normalize else "d",
        cmap="Blues",
        cbar=normalize,
        square=True,
        ax=ax,
    )
    ax.set_xlabel("Prediction")
    ax.set_ylabel("Reference")
    ax.tick_params(axis="y", rotation=0)
    ax.set_title(f"{result.method}: accuracy {result.accuracy:.4f}")
    ax.figure.tight_layout()
    return ax.figure


def plot_confusion_matrix_plotly(result: EvaluationResult, *, normalize: bool = False) -> go.Figure:
    """Interactive confusion matrix.

    Drawn with [:class:`plotly.graph_objects.Heatmap`](https://plotly.com/python/heatmaps/).
    """
    cm = _row_normalized(result.confusion_matrix) if normalize else result.confusion_matrix
    fig = go.Figure(
        go.Heatmap(
            z=cm.to_numpy(),
            x=[str(c) for c in cm.columns],
            y=[str(i) for i in cm.index],
            colorscale="Blues",
            text=cm.round(2).to_numpy() if normalize else cm.to_numpy(),
            texttemplate="%{text}",
            hovertemplate="reference %{y}<br>prediction %{x}<br>value %{z}<extra></extra>",
        ),
    )
    fig.update_layout(
        title=f"{result.method}: accuracy {result.accuracy:.4f}",
        xaxis_title="Prediction",
        yaxis_title="Reference",
        yaxis_autorange="reversed",
        template="plotly_white",
    )
    return fig


def plot_model_comparison(
    comparison: pd.DataFrame,
    figsize: tuple[int, int] = (8, 5),
) -> Figure:
    """Grouped bars of cross-validated and held-out accuracy per model.

    Args:
        comparison: Output of :meth:`~wle_tlbx.analysis.model_registry.ModelRegistry.compare`.
        figsize: Figure size.
    """
    score_cols = [col for col in ("cv_accuracy", "test_accuracy") if col in comparison.columns]
    if comparison.empty or not score_cols:
        raise ValueError("Comparison table has no accuracy columns to plot.")
    long = comparison[score_cols].reset_index().melt(id_vars="model", var_name="score", value_name="accuracy")

    fig, ax = plt.subplots(figsize=figsize)
    sns.barplot(data=long, x="model", y="accuracy", hue="score", ax=ax)
    ax.set_ylim(0, 1)
    ax.set_ylabel("Accuracy")
    ax.set_title("Cross-validated vs Held-out Accuracy")
    fig.tight_layout()
    return fig
