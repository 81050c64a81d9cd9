"""Correlation analysis and correlation-based column pruning."""

from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd

from wle_tlbx.data.views import DatasetView
from wle_tlbx.errors import NonSquareCorrelation

from .base_analyser import BaseAnalyser


@dataclass(frozen=True)
class CorrelationResult:
    """Correlation analysis outputs grouped for plotting and reporting.

    Attributes:
        matrix: Full Pearson correlation matrix (DataFrame; rows/cols = numeric features in view).
        pretty_by_col: Mapping from raw feature names to presentation labels.
        feature_pairs: DataFrame with columns `feature_a`, `feature_b`, `correlation`,
            `abs_correlation`, `pair`; sorted by strongest absolute correlations.
        cutoff: Absolute correlation cutoff used for pruning.
        correlated: Columns flagged for removal by :func:`find_correlated_columns`.
    """

    matrix: pd.DataFrame
    pretty_by_col: dict[str, str]
    feature_pairs: pd.DataFrame
    cutoff: float
    correlated: list[str]

    @property
    def retained(self) -> list[str]:
        """Columns of the matrix that survive pruning, in matrix order."""
        dropped = set(self.correlated)
        return [col for col in self.matrix.columns if col not in dropped]

    # ------------------------------------------------------------------ plotting shortcuts
    def plot_heatmap(self, **kwargs: object):
        """Plot correlation heatmap using the plotting helper."""
        from wle_tlbx.plotting.correlation_plots import plot_correlation_heatmap  # noqa: PLC0415

        return plot_correlation_heatmap(self, **kwargs)

    def plot_top_pairs(self, **kwargs: object):
        """Plot top positive/negative correlated pairs."""
        from wle_tlbx.plotting.correlation_plots import plot_top_correlated_pairs  # noqa: PLC0415

        return plot_top_correlated_pairs(self, **kwargs)


def find_correlated_columns(corr_mat: pd.DataFrame, cutoff: float = 0.7) -> list[str]:
    """Return the columns to drop so that no retained pair exceeds ``cutoff`` in absolute correlation.

    Greedy pruning in the manner of caret's ``findCorrelation(exact = TRUE)``:

    1. Columns are visited in decreasing order of their mean absolute
       correlation with all other columns (ties keep the matrix order).
    2. For every still-retained pair (a, b) with :math:`|r_{ab}| > cutoff`, the
       mean absolute correlation of a and of b against the columns retained so
       far is recomputed and the column with the *higher* mean is dropped. On
       equality the later column of the visiting order (b) is dropped.

    Every pair is inspected while both of its columns are still retained, so
    the surviving columns never contain a pair above the cutoff. Pairs with an
    undefined correlation (constant columns) never trigger a removal.

    Args:
        corr_mat: Square, symmetric correlation matrix.
        cutoff: Absolute correlation threshold (strict ``>``).

    Returns:
        Dropped column names in matrix order.

    Raises:
        NonSquareCorrelation: If the matrix is not square or has fewer than two columns.
    """
    n_rows, n_cols = corr_mat.shape
    if n_rows != n_cols or not corr_mat.index.equals(corr_mat.columns):
        raise NonSquareCorrelation(
            f"Correlation matrix must be square with matching labels, got shape {corr_mat.shape}.",
        )
    if n_cols < 2:
        raise NonSquareCorrelation(f"Correlation pruning needs at least two numeric columns, got {n_cols}.")

    abs_corr = corr_mat.abs().mask(np.eye(n_cols, dtype=bool))
    visiting_order = abs_corr.mean().sort_values(ascending=False, kind="stable").index.tolist()

    retained = list(visiting_order)
    for idx, col_a in enumerate(visiting_order[:-1]):
        for col_b in visiting_order[idx + 1 :]:
            if col_a not in retained:
                break
            if col_b not in retained or not abs_corr.at[col_a, col_b] > cutoff:
                continue
            mean_a = abs_corr.loc[col_a, retained].mean()
            mean_b = abs_corr.loc[col_b, retained].mean()
            retained.remove(col_a if mean_a > mean_b else col_b)

    kept = set(retained)
    return [col for col in corr_mat.columns if col not in kept]


class CorrelationAnalyzer(BaseAnalyser):
    """Analyzer for computing feature correlations and the columns to prune.

    The label column (categorical) is never part of the matrix.

    Example:
        >>> from wle_tlbx.data import WeightLiftingDataset
        >>> ds = WeightLiftingDataset.from_csv()
        >>> corr_res = ds.make_correlation_analyzer().fit().result()
        >>> corr_res.correlated[:5]
        >>> fig = corr_res.plot_heatmap(annot=False)
    """

    def __init__(self, view: DatasetView, cutoff: float = 0.7):
        """Initialize the correlation analyzer with a dataset view and pruning cutoff."""
        if not 0.0 <= cutoff <= 1.0:
            raise ValueError(f"cutoff must lie in [0, 1], got {cutoff}.")
        self._view = view
        self.cutoff = cutoff
        self._corr_mat: pd.DataFrame | None = None
        self._correlated: list[str] | None = None

    def get_correlation_matrix(self) -> pd.DataFrame:
        """Compute the Pearson correlation matrix via :meth:`pandas.DataFrame.corr`.

        Raises:
            NonSquareCorrelation: If the view has fewer than two numeric feature columns.
        """
        if self._corr_mat is None:
            numeric_cols = [col for col in self._view.numeric_cols if col != self._view.label_col]
            if len(numeric_cols) < 2:
                raise NonSquareCorrelation(
                    f"Correlation requires at least two numeric columns, got {len(numeric_cols)}: {numeric_cols}",
                )
            self._corr_mat = self._view.df.loc[:, numeric_cols].corr()
        return self._corr_mat

    def get_top_correlated_pairs(self, n: int | None = 20) -> pd.DataFrame:
        """Return the strongest absolute Pearson correlations between feature pairs.

        The symmetric matrix is vectorized by masking the upper triangle
        (excluding the diagonal) with :func:`np.triu` and melting the rest.
        ``n=None`` returns every pair.
        """
        corr_matrix = self.get_correlation_matrix()
        mask = np.triu(np.ones(corr_matrix.shape, dtype=bool), k=1)

        pairs = (
            corr_matrix.where(mask)
            .melt(ignore_index=False, var_name="feature_b", value_name="correlation")
            .dropna()
            .reset_index()
            .rename(columns={"index": "feature_a"})
            .assign(
                abs_correlation=lambda d: d.correlation.abs(),
                pair=lambda d: d.feature_a + " vs " + d.feature_b,
            )
            .sort_values("abs_correlation", ascending=False, kind="stable")
            .reset_index(drop=True)
        )
        return pairs if n is None else pairs.head(n)

    def get_pairs_above_cutoff(self) -> pd.DataFrame:
        """Return all pairs whose absolute correlation exceeds :attr:`cutoff`."""
        pairs = self.get_top_correlated_pairs(n=None)
        return pairs.loc[pairs["abs_correlation"] > self.cutoff].reset_index(drop=True)

    def get_correlated_columns(self) -> list[str]:
        """Columns to drop so that no remaining pair exceeds the cutoff."""
        if self._correlated is None:
            self._correlated = find_correlated_columns(self.get_correlation_matrix(), cutoff=self.cutoff)
        return self._correlated

    def fit(self) -> Self:
        """Compute correlation matrix and pruning set."""
        self.get_correlated_columns()
        return self

    def result(self, *, top_n_pairs: int = 20) -> CorrelationResult:
        if self._correlated is None:
            raise ValueError("Call fit() before result().")
        return CorrelationResult(
            matrix=self.get_correlation_matrix(),
            pretty_by_col=dict(self._view.pretty_by_col),
            feature_pairs=self.get_top_correlated_pairs(n=top_n_pairs),
            cutoff=self.cutoff,
            correlated=list(self._correlated),
        )
