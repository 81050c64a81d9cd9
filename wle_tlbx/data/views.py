"""Task-specific views over dataset content."""

from collections.abc import Mapping
from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class DatasetView:
    """Immutable snapshot of dataset data and related metadata.

    Attributes:
        df: Dataframe slice containing the relevant columns.
        pretty_by_col: Mapping from column names to display-friendly labels.
        numeric_cols: Ordered list of numeric predictor names present in ``df`` (label excluded).
        label_col: Optional name of the categorical label column.
        is_standardized: Indicates if numeric features have been standardized (zero mean, unit variance).
    """

    df: pd.DataFrame
    """Dataframe slice containing the relevant columns."""
    pretty_by_col: Mapping[str, str]
    """Mapping from column names to display-friendly labels."""
    numeric_cols: list[str]
    label_col: str | None = None
    is_standardized: bool | None = None
    """Indicates if numeric features have been standardized (zero mean, unit variance)."""

    @property
    def features(self) -> pd.DataFrame:
        """Return view over numeric feature columns."""
        cols = self.numeric_cols or [c for c in self.df.columns if c != self.label_col]
        return self.df.loc[:, cols]

    @property
    def has_labels(self) -> bool:
        return self.label_col is not None and self.label_col in self.df.columns

    @property
    def labels(self) -> pd.Series:
        """Return the label column.

        Raises:
            ValueError: If the view carries no label column.
        """
        if not self.has_labels:
            raise ValueError("Dataset view has no label column configured.")
        return self.df[self.label_col]

    @property
    def n_rows(self) -> int:
        return len(self.df)
