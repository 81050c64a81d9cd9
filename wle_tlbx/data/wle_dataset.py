"""Loading of the Weight Lifting Exercises CSV files."""

import logging
from pathlib import Path

import pandas as pd

from wle_tlbx.errors import MalformedInputError
from wle_tlbx.utils.paths import get_dataset_path

from .base_dataset import BaseDataset
from .wle_columns import WLEColumn as Col


logger = logging.getLogger(__name__)

MISSING_MARKERS: tuple[str, ...] = ("", "NA", "#DIV/0!")
"""Cell values read as missing. ``#DIV/0!`` is left behind by the spreadsheet export of the summary statistics."""


class WeightLiftingDataset(BaseDataset):
    """Loading and label typing for the Weight Lifting Exercises dataset.

    Loading only normalizes the header and types the label column as
    categorical; every other column keeps the dtype pandas infers so that the
    predictor filter can tell numeric, textual and incomplete columns apart.

    **Example workflow**:
    >>> from wle_tlbx.data import WeightLiftingDataset
    >>> ds = WeightLiftingDataset.from_csv()
    >>> parts = ds.split(train_fraction=0.7, seed=300)
    >>> train = ds.with_df(parts.train)
    >>> filtered = train.make_predictor_filter(cutoff=0.7).fit().result()
    >>> filtered.predictors[:3], filtered.dropped_correlated[:3]

    The unlabeled evaluation file is loaded with ``require_label=False``:

    >>> cases = WeightLiftingDataset.from_csv(csv_path=get_dataset_path("pml_testing"), require_label=False)
    >>> cases.has_labels
    False
    """

    Col = Col

    @classmethod
    def from_csv(
        cls,
        csv_path: str | Path | None = None,
        *,
        require_label: bool = True,
    ) -> "WeightLiftingDataset":
        """Load a WLE CSV file.

        - Read the CSV, treating ``MISSING_MARKERS`` as missing
        - Name the unnamed leading row-number column ``X``
        - Type ``classe`` as categorical with the declared categories A-E

        Args:
            csv_path: Path to the CSV file (defaults to the training file in the data directory).
            require_label: Fail when the label column is absent.

        Returns:
            WeightLiftingDataset instance with loaded data.

        Raises:
            MalformedInputError: If the file cannot be parsed, rows are ragged,
                the label column is missing (with ``require_label``) or carries
                missing/unknown categories.
        """
        csv_path = get_dataset_path("pml_training") if csv_path is None else Path(csv_path)

        try:
            raw = pd.read_csv(csv_path, na_values=list(MISSING_MARKERS), keep_default_na=True, low_memory=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise MalformedInputError(f"Could not parse '{csv_path}': {exc}") from exc

        wle_df = raw.pipe(cls._normalize_col_names)

        if Col.TARGET in wle_df.columns:
            wle_df = wle_df.pipe(cls._type_label)
        elif require_label:
            raise MalformedInputError(f"Label column '{Col.TARGET}' not found in '{csv_path}'.")

        logger.info("Loaded %d rows x %d columns from %s", len(wle_df), wle_df.shape[1], csv_path)
        return cls(df=wle_df)

    @staticmethod
    def _normalize_col_names(df: pd.DataFrame) -> pd.DataFrame:
        """Strip header whitespace and name the unnamed row-number column ``X``."""
        stripped = df.columns.str.strip()
        renamed = [Col.ROW_ID if (name == "" or name.startswith("Unnamed: 0")) else name for name in stripped]
        if len(set(renamed)) != len(renamed):
            raise MalformedInputError("Duplicate column names after header normalization.")
        return df.set_axis(renamed, axis=1)

    @staticmethod
    def _type_label(df: pd.DataFrame) -> pd.DataFrame:
        """Convert ``classe`` to a categorical column with the declared categories."""
        labels = df[Col.TARGET]
        if labels.isna().any():
            raise MalformedInputError(f"Label column '{Col.TARGET}' has {int(labels.isna().sum())} missing values.")

        labels = labels.astype(str).str.strip()
        declared = Col.target_categories()
        unknown = sorted(set(labels) - set(declared)) if declared else []
        if unknown:
            raise MalformedInputError(f"Unknown '{Col.TARGET}' categories {unknown}; expected {list(declared)}.")

        categories = list(declared) if declared else sorted(labels.unique())
        return df.assign(**{Col.TARGET: pd.Categorical(labels, categories=categories)})
