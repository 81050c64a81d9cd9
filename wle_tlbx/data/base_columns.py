"""Base column definitions and metadata structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class ColumnMetadata:
    """Metadata for a dataset column.

    Attributes:
        original_name: Column name as it appears in the raw CSV file.
        cleaned_name: Standardized column name used in DataFrames.
        dtype: Expected pandas data type as a string.
        pretty_name: Human-readable name for use in plots and reports.
    """

    original_name: str
    cleaned_name: str
    dtype: str
    pretty_name: str


class BaseColumn(StrEnum):
    """Base class for dataset column enums.

    All derived column enums must define a TARGET member naming the categorical
    label column of the dataset.

    Subclasses must implement:
    - metadata(): Return ColumnMetadata for each enum member
    - numeric_columns(): Return list of numeric measurement column names
    - identifier_columns(): Return list of identifier/metadata column names
    """

    TARGET: str

    def metadata(self) -> ColumnMetadata:
        """Get metadata for this column.

        Raises:
            NotImplementedError: If not implemented by subclass.
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement metadata() method")

    @classmethod
    def numeric_columns(cls) -> list[str]:
        """Get all numeric measurement column names.

        Raises:
            NotImplementedError: If not implemented by subclass.
        """
        raise NotImplementedError(f"{cls.__name__} must implement numeric_columns() method")

    @classmethod
    def identifier_columns(cls) -> list[str]:
        """Get identifier column names, i.e. columns known a priori to carry no predictive signal.

        Raises:
            NotImplementedError: If not implemented by subclass.
        """
        raise NotImplementedError(f"{cls.__name__} must implement identifier_columns() method")

    @classmethod
    def target_categories(cls) -> tuple[str, ...]:
        """Declared label categories. An empty tuple means "infer from the data"."""
        return ()

    @property
    def pretty_name(self) -> str:
        """Get the human-readable name for plots and reports."""
        return self.metadata().pretty_name

    @property
    def original_name(self) -> str:
        """Get the original column name from the CSV file."""
        return self.metadata().original_name

    @property
    def dtype_name(self) -> str:
        """Get the expected data type as a string."""
        return self.metadata().dtype
