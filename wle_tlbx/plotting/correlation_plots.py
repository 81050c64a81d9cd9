"""Correlation analysis visualization functions."""

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from matplotlib.figure import Figure

from wle_tlbx.analysis.correlation_analyzer import CorrelationResult


def plot_correlation_heatmap(
    result: CorrelationResult,
    figsize: tuple[int, int] = (20, 20),
    *,
    annot: bool = False,
    highlight_dropped: bool = True,
    **kwargs: object,
) -> Figure:
    """Plot correlation heatmap of all pruning candidates.

    With 50+ sensor columns the cell annotations are unreadable, so ``annot``
    is off by default. Columns dropped by the pruning are marked with a
    trailing ``*`` in the tick labels when ``highlight_dropped`` is set.
    """
    fig, ax = plt.subplots(figsize=figsize)

    dropped = set(result.correlated) if highlight_dropped else set()
    label_map = {
        col: f"{result.pretty_by_col.get(col, col)}{' *' if col in dropped else ''}" for col in result.matrix.columns
    }

    sns.heatmap(
        result.matrix.rename(index=label_map, columns=label_map),
        annot=annot,
        fmt=".2f",
        cmap="coolwarm",
        vmin=-1,
        vmax=1,
        ax=ax,
        square=True,
        cbar_kws={"shrink": 0.8},
        **kwargs,  # type: ignore[arg-type]
    )

    ax.set_xticklabels(
        ax.get_xticklabels(),
        rotation=45,
        ha="right",
        rotation_mode="anchor",
    )
    ax.tick_params(axis="y", rotation=0)
    title = "Predictor Correlation Heatmap"
    if dropped:
        title += f" (* = dropped at |r| > {result.cutoff:.2f})"
    ax.set_title(title)
    fig.tight_layout()

    return fig


def _prettify_pair_columns(
    pairs: pd.DataFrame,
    pretty_by_col: dict[str, str],
) -> pd.DataFrame:
    """Attach pretty labels for plotting convenience."""

    def _pretty_pair(row: pd.Series) -> str:
        a = pretty_by_col.get(row["feature_a"], row["feature_a"])
        b = pretty_by_col.get(row["feature_b"], row["feature_b"])
        return f"{a} vs {b}"

    if pairs.empty:
        return pairs.assign(pretty_pair=pd.Series(dtype=str))
    return pairs.assign(
        pretty_pair=lambda d: d.apply(_pretty_pair, axis=1),
    )


def plot_top_correlated_pairs(
    result: CorrelationResult,
    n: int = 20,
    threshold: float | None = None,
    figsize: tuple[int, int] = (12, 10),
) -> tuple[Figure, Figure]:
    """Plot top positively and negatively correlated feature pairs.

    Args:
        result: CorrelationResult from CorrelationAnalyzer.
        n: Number of top correlated pairs to display in each plot.
        threshold: Reference line position; defaults to the pruning cutoff of ``result``.
        figsize: Figure size for each plot.
    """
    threshold = result.cutoff if threshold is None else threshold
    pairs = _prettify_pair_columns(result.feature_pairs, result.pretty_by_col)
    positive = pairs.loc[pairs["correlation"] > 0].nlargest(n, "abs_correlation")
    negative = pairs.loc[pairs["correlation"] < 0].nlargest(n, "abs_correlation")

    fig_pos, ax_pos = plt.subplots(figsize=figsize)
    if not positive.empty:
        sns.barplot(data=positive, x="correlation", y="pretty_pair", color="tab:red", ax=ax_pos)
    ax_pos.set_title(f"Top {len(positive)} Positive Correlations")
    ax_pos.set_xlabel("Pearson Correlation")
    ax_pos.axvline(0, color="black", linewidth=1, linestyle="--")
    ax_pos.axvline(threshold, color="tab:orange", linewidth=2, linestyle="--")
    fig_pos.tight_layout()

    fig_neg, ax_neg = plt.subplots(figsize=figsize)
    if not negative.empty:
        sns.barplot(data=negative, x="correlation", y="pretty_pair", color="tab:blue", ax=ax_neg)
    ax_neg.set_title(f"Top {len(negative)} Negative Correlations")
    ax_neg.set_xlabel("Pearson Correlation")
    ax_neg.axvline(0, color="black", linewidth=1, linestyle="--")
    ax_neg.axvline(-threshold, color="tab:orange", linewidth=2, linestyle="--")
    fig_neg.tight_layout()

    return fig_pos, fig_neg
