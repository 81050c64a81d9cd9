"""Base dataset class for all dataset implementations."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Self

import pandas as pd
from sklearn.preprocessing import StandardScaler


if TYPE_CHECKING:
    from wle_tlbx.analysis.correlation_analyzer import CorrelationAnalyzer
    from wle_tlbx.analysis.cv_trainer import CrossValidatedTrainer
    from wle_tlbx.analysis.kmeans_baseline import KMeansBaseline
    from wle_tlbx.analysis.predictor_filter import PredictorFilter

from .base_columns import BaseColumn
from .partition import PartitionResult, stratified_split
from .views import DatasetView


class BaseDataset(ABC):
    """Abstract base class for dataset handlers used throughout the WLE toolbox.

    Instances are immutable snapshots: every transformation returns a new
    instance via :meth:`with_df` instead of modifying ``df`` in place.
    """

    Col: type[BaseColumn]

    def __init__(self, df: pd.DataFrame | None = None) -> None:
        """Initialize the base dataset.

        Args:
            df: Pre-loaded and cleaned DataFrame (optional)
        """
        self._df: pd.DataFrame | None = df
        self._df_standardized: pd.DataFrame | None = None

    @classmethod
    @abstractmethod
    def from_csv(cls, csv_path: str | Path | None = None, **kwargs: object) -> "BaseDataset":
        """Load dataset from CSV file.

        Args:
            csv_path: Path to the CSV file
            **kwargs: Additional loading parameters

        Returns:
            Dataset instance with loaded data
        """
        ...

    @property
    def df(self) -> pd.DataFrame:
        """Get the loaded DataFrame.

        Raises:
            ValueError: If dataset not loaded
        """
        if self._df is None:
            raise ValueError("Dataset not loaded. Use from_csv() to load data.")
        return self._df

    def with_df(self, df: pd.DataFrame) -> Self:
        """Return a new dataset of the same class wrapping ``df``."""
        return type(self)(df=df)

    @property
    def label_col(self) -> str:
        return self.Col.TARGET

    @property
    def has_labels(self) -> bool:
        return self.label_col in self.df.columns

    @property
    def categories(self) -> list[str]:
        """Label categories of the loaded data (declared categories for categorical labels)."""
        labels = self.df[self.label_col]
        if isinstance(labels.dtype, pd.CategoricalDtype):
            return labels.cat.categories.tolist()
        return sorted(labels.dropna().unique().tolist())

    @property
    def numeric_cols(self) -> pd.Index:
        """Get numeric column names (the categorical label is never numeric)."""
        return self.df.select_dtypes(include=["number"]).columns.difference([self.label_col], sort=False)

    @property
    def df_standardized(self) -> pd.DataFrame:
        """Get the DataFrame with numeric columns standardized.

        X <- (X - E[X]) / sd(X)
        """
        if self._df_standardized is None:
            self._df_standardized = self.standardize()
        return self._df_standardized

    def standardize(self, df: pd.DataFrame | None = None) -> pd.DataFrame:
        """Standardize numeric columns using [sklearn's StandardScaler](https://scikit-learn.org/stable/modules/generated/sklearn.preprocessing.StandardScaler.html).

        Non-numeric columns (including the label) are carried over unchanged.
        """
        if df is None:
            df = self.df
        numeric_cols = df.select_dtypes(include=["number"]).columns.difference([self.label_col], sort=False)
        scaled = StandardScaler().fit_transform(df[numeric_cols])
        return df.assign(**{col: scaled[:, idx] for idx, col in enumerate(numeric_cols)})

    def get_pretty_name(self, column_name: str) -> str:
        """Convert column name to pretty name for visualization.

        Falls back to title-casing for columns that are not enum members
        (e.g. the sensor measurements).
        """
        try:
            col_enum = self.Col(column_name)
        except ValueError:
            return column_name.replace("_", " ").title()
        else:
            return str(col_enum.pretty_name)

    def view(
        self,
        columns: Iterable[str] | None = None,
        standardized: bool = False,
        include_label: bool = True,
    ) -> DatasetView:
        """Build an immutable dataset view for analyzers and plotting layers.

        Rows are never dropped here; missing-value handling is the job of the
        predictor filter.

        Args:
            columns: Columns to include in the view (defaults to all)
            standardized: Use standardized numeric columns
            include_label: Append the label column (if present) to the view

        Returns:
            DatasetView containing selected data and metadata
        """
        frame = self.df_standardized if standardized else self.df

        selected_cols = [col for col in (columns or frame.columns.to_list()) if col != self.label_col]
        if include_label and self.has_labels:
            selected_cols.append(self.label_col)
        frame = frame.loc[:, selected_cols]

        numeric = set(self.numeric_cols)
        return DatasetView(
            df=frame,
            pretty_by_col={col: self.get_pretty_name(col) for col in selected_cols},
            numeric_cols=[col for col in selected_cols if col in numeric],
            label_col=self.label_col if include_label and self.has_labels else None,
            is_standardized=standardized,
        )

    def feature_columns(self, extra_exclude: Iterable[str] | None = None) -> list[str]:
        """Return numeric feature columns, excluding identifiers and the label."""
        exclude = set(self.Col.identifier_columns())
        if extra_exclude:
            exclude.update(extra_exclude)
        return [col for col in self.numeric_cols if col not in exclude]

    def split(self, train_fraction: float = 0.7, seed: int = 300) -> PartitionResult:
        """Stratified train/test split on the label column (see :func:`stratified_split`)."""
        return stratified_split(self.df, self.label_col, train_fraction=train_fraction, seed=seed)

    def make_correlation_analyzer(
        self,
        columns: Iterable[str] | None = None,
        standardized: bool = False,
    ) -> "CorrelationAnalyzer":
        """Instantiate a correlation analyzer over the numeric feature columns."""
        from wle_tlbx.analysis.correlation_analyzer import CorrelationAnalyzer

        return CorrelationAnalyzer(
            self.view(
                columns=columns if columns is not None else self.feature_columns(),
                standardized=standardized,
                include_label=False,
            ),
        )

    def make_predictor_filter(
        self,
        cutoff: float = 0.7,
        exclude: Sequence[str] | None = None,
    ) -> "PredictorFilter":
        """Instantiate a predictor filter over all columns of this dataset.

        Args:
            cutoff: Absolute correlation above which one column of a pair is dropped.
            exclude: Identifier columns to drop by name (defaults to ``Col.identifier_columns()``).
        """
        from wle_tlbx.analysis.predictor_filter import PredictorFilter

        return PredictorFilter(
            self.view(),
            cutoff=cutoff,
            exclude=self.Col.identifier_columns() if exclude is None else exclude,
        )

    def make_kmeans_baseline(
        self,
        n_clusters: int = 5,
        columns: Iterable[str] | None = None,
        standardized: bool = False,
        random_state: int | None = None,
        max_iter: int = 300,
    ) -> "KMeansBaseline":
        """Instantiate the k-means baseline over numeric feature columns.

        Example:
            >>> from wle_tlbx.data import WeightLiftingDataset
            >>> ds = WeightLiftingDataset.from_csv()
            >>> clusters = ds.make_kmeans_baseline(n_clusters=5, random_state=300).fit().result()
            >>> clusters.contingency
        """
        from wle_tlbx.analysis.kmeans_baseline import KMeansBaseline

        return KMeansBaseline(
            self.view(
                columns=columns if columns is not None else self.feature_columns(),
                standardized=standardized,
            ),
            n_clusters=n_clusters,
            random_state=random_state,
            max_iter=max_iter,
        )

    def make_trainer(
        self,
        method: str,
        n_folds: int = 3,
        random_state: int | None = None,
        param_grid: Mapping[str, Sequence[object]] | None = None,
        **kwargs: object,
    ) -> "CrossValidatedTrainer":
        """Instantiate a cross-validated trainer over all numeric predictors of this dataset."""
        from wle_tlbx.analysis.cv_trainer import CrossValidatedTrainer

        return CrossValidatedTrainer(
            self.view(),
            method=method,
            n_folds=n_folds,
            random_state=random_state,
            param_grid=param_grid,
            **kwargs,
        )
