"""Predictor selection: drop identifier, textual, incomplete and redundant columns."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Self

import pandas as pd

from wle_tlbx.data.views import DatasetView
from wle_tlbx.errors import EmptyPredictorSet

from .base_analyser import BaseAnalyser
from .correlation_analyzer import CorrelationAnalyzer, CorrelationResult


logger = logging.getLogger(__name__)


def is_textual(series: pd.Series) -> bool:
    """True for columns that are neither numeric (incl. boolean) nor categorical."""
    return not (
        pd.api.types.is_numeric_dtype(series.dtype)
        or pd.api.types.is_bool_dtype(series.dtype)
        or isinstance(series.dtype, pd.CategoricalDtype)
    )


@dataclass(frozen=True)
class PredictorFilterResult:
    """Outcome of :class:`PredictorFilter`.

    Attributes:
        df: Filtered table: retained predictors followed by the label column.
        label_col: Name of the label column.
        predictors: Retained predictor columns in table order.
        dropped_identifiers: Excluded identifier columns that were present.
        dropped_textual: Non-numeric, non-categorical columns.
        dropped_missing: Columns with at least one missing value.
        dropped_correlated: Columns removed by correlation pruning.
        correlation: Correlation analysis the pruning was based on.
    """

    df: pd.DataFrame
    label_col: str
    predictors: list[str]
    dropped_identifiers: list[str]
    dropped_textual: list[str]
    dropped_missing: list[str]
    dropped_correlated: list[str]
    correlation: CorrelationResult

    @property
    def cutoff(self) -> float:
        return self.correlation.cutoff

    @property
    def dropped(self) -> dict[str, list[str]]:
        """Dropped columns per filtering step, in execution order."""
        return {
            "identifier": self.dropped_identifiers,
            "textual": self.dropped_textual,
            "missing": self.dropped_missing,
            "correlated": self.dropped_correlated,
        }

    def summary(self) -> pd.DataFrame:
        """One row per filtering step with the number of dropped columns."""
        return pd.DataFrame(
            [{"step": step, "n_dropped": len(cols), "columns": ", ".join(cols)} for step, cols in self.dropped.items()],
        ).set_index("step")

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Select the retained predictors (and the label, if present) from another table.

        The same column set is applied without refitting, so the test subset
        is described by exactly the predictors the models were trained on.

        Raises:
            ValueError: If a retained predictor is missing from ``df``.
        """
        missing = [col for col in self.predictors if col not in df.columns]
        if missing:
            raise ValueError(f"Table lacks retained predictor columns: {missing}")
        cols = [*self.predictors, *([self.label_col] if self.label_col in df.columns else [])]
        return df.loc[:, cols]

    # ------------------------------------------------------------------ plotting shortcuts
    def plot_heatmap(self, **kwargs: object):
        """Correlation heatmap of the candidates that entered pruning."""
        return self.correlation.plot_heatmap(**kwargs)

    def plot_top_pairs(self, **kwargs: object):
        return self.correlation.plot_top_pairs(**kwargs)


class PredictorFilter(BaseAnalyser):
    """Reduce a table to numeric predictors usable by the classifiers.

    Steps (each one yields a new frame; the view is never modified):

    1. drop the explicitly named identifier/metadata columns,
    2. drop textual columns (the label is always kept),
    3. drop columns with at least one missing value,
    4. drop highly correlated columns (see :func:`~wle_tlbx.analysis.correlation_analyzer.find_correlated_columns`).

    Running the filter on its own output removes nothing further.

    Example:
        >>> from wle_tlbx.data import WeightLiftingDataset
        >>> train = WeightLiftingDataset.from_csv()
        >>> res = train.make_predictor_filter(cutoff=0.7).fit().result()
        >>> res.summary()
    """

    def __init__(self, view: DatasetView, *, cutoff: float = 0.7, exclude: Sequence[str] = ()) -> None:
        """Initialize the filter.

        Args:
            view: Full table including the label column.
            cutoff: Absolute correlation above which one column of a pair is dropped.
            exclude: Identifier column names to drop; names absent from the table are ignored.
        """
        if not view.has_labels:
            raise ValueError("PredictorFilter requires a view with a label column.")
        self._view = view
        self.cutoff = cutoff
        self.exclude = list(exclude)
        self._result: PredictorFilterResult | None = None

    def fit(self) -> Self:
        label_col = self._view.label_col
        df = self._view.df

        dropped_identifiers = [col for col in df.columns if col in set(self.exclude) and col != label_col]
        df = df.drop(columns=dropped_identifiers)

        dropped_textual = [col for col in df.columns if col != label_col and is_textual(df[col])]
        df = df.drop(columns=dropped_textual)

        dropped_missing = [col for col in df.columns if col != label_col and df[col].isna().any()]
        df = df.drop(columns=dropped_missing)

        candidates = [col for col in df.columns if col != label_col]
        if not candidates:
            raise EmptyPredictorSet(
                "Filtering removed every predictor column "
                f"({len(dropped_identifiers)} identifier, {len(dropped_textual)} textual, "
                f"{len(dropped_missing)} incomplete).",
            )

        numeric_candidates = [col for col in candidates if pd.api.types.is_numeric_dtype(df[col].dtype)]
        corr_view = DatasetView(
            df=df.loc[:, numeric_candidates],
            pretty_by_col={col: self._view.pretty_by_col.get(col, col) for col in numeric_candidates},
            numeric_cols=numeric_candidates,
            is_standardized=self._view.is_standardized,
        )
        correlation = CorrelationAnalyzer(corr_view, cutoff=self.cutoff).fit().result()
        df = df.drop(columns=correlation.correlated)
        df = df.loc[:, [*(col for col in df.columns if col != label_col), label_col]]

        logger.info(
            "Predictor filter: %d identifier, %d textual, %d incomplete, %d correlated (|r| > %.2f) columns dropped; "
            "%d predictors retained",
            len(dropped_identifiers),
            len(dropped_textual),
            len(dropped_missing),
            len(correlation.correlated),
            self.cutoff,
            df.shape[1] - 1,
        )
        logger.debug("Correlated columns dropped: %s", correlation.correlated)

        self._result = PredictorFilterResult(
            df=df,
            label_col=label_col,
            predictors=[col for col in df.columns if col != label_col],
            dropped_identifiers=dropped_identifiers,
            dropped_textual=dropped_textual,
            dropped_missing=dropped_missing,
            dropped_correlated=correlation.correlated,
            correlation=correlation,
        )
        return self

    def result(self) -> PredictorFilterResult:
        if self._result is None:
            raise ValueError("Must call fit() before result()")
        return self._result
