"""Seeded stratified train/test partitioning."""

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartitionResult:
    """Train/test snapshots produced by :func:`stratified_split`.

    Attributes:
        train: Training rows (original index preserved).
        test: Held-out rows (original index preserved).
        label_col: Label column used for stratification.
        train_fraction: Requested share of rows in ``train``.
        seed: Random seed of the split.
    """

    train: pd.DataFrame
    test: pd.DataFrame
    label_col: str
    train_fraction: float
    seed: int

    @property
    def n_rows(self) -> int:
        return len(self.train) + len(self.test)

    def summary(self) -> pd.DataFrame:
        """Per-category row counts and proportions of both subsets."""
        train_counts = self.train[self.label_col].value_counts(sort=False)
        test_counts = self.test[self.label_col].value_counts(sort=False)
        return (
            pd.DataFrame({"train": train_counts, "test": test_counts})
            .fillna(0)
            .astype(int)
            .assign(
                train_share=lambda d: d["train"] / d["train"].sum(),
                test_share=lambda d: d["test"] / d["test"].sum(),
            )
            .rename_axis(self.label_col)
        )

    def plot_class_distribution(self, **kwargs: object):
        """Plot category shares of both subsets."""
        from wle_tlbx.plotting.dataset_plots import plot_class_distribution  # noqa: PLC0415

        return plot_class_distribution(self, **kwargs)


def stratified_split(
    df: pd.DataFrame,
    label_col: str,
    *,
    train_fraction: float = 0.7,
    seed: int = 300,
) -> PartitionResult:
    """Split ``df`` into train/test rows preserving label proportions.

    Uses [`sklearn.model_selection.train_test_split`](https://scikit-learn.org/stable/modules/generated/sklearn.model_selection.train_test_split.html)
    with ``stratify`` on the label, so each category is allocated to the
    training subset in proportion ``train_fraction`` (up to one row of
    rounding). When that stratified shuffle is infeasible (a side smaller
    than the number of categories, or a category with a single row), rows are
    allocated per category by largest remainder instead. The training size is
    ``round(train_fraction * n)`` either way; both subsets keep the original
    row index and together contain every row exactly once. Identical input and
    seed yield an identical partition.

    Args:
        df: Full table including the label column.
        label_col: Name of the categorical label column.
        train_fraction: Share of rows assigned to the training subset, in (0, 1).
        seed: Random seed of the shuffle.

    Returns:
        PartitionResult with ``train`` and ``test`` frames.

    Raises:
        ValueError: If the fraction is outside (0, 1), the label column is
            absent or carries missing values, or the table has fewer than two rows.
    """
    if not 0.0 < train_fraction < 1.0:
        raise ValueError(f"train_fraction must lie in (0, 1), got {train_fraction}.")
    if label_col not in df.columns:
        raise ValueError(f"Label column '{label_col}' not found in data.")
    if df[label_col].isna().any():
        raise ValueError(f"Label column '{label_col}' contains missing values.")

    n_rows = len(df)
    if n_rows < 2:
        raise ValueError("At least two rows are required to partition a table.")
    n_train = min(max(round(train_fraction * n_rows), 1), n_rows - 1)

    counts = df[label_col].value_counts(sort=False)
    counts = counts[counts > 0]
    if min(n_train, n_rows - n_train) >= len(counts) and counts.min() >= 2:
        train, test = train_test_split(
            df,
            train_size=n_train,
            stratify=df[label_col],
            random_state=seed,
        )
    else:
        logger.debug("Stratified shuffle infeasible for %d rows; allocating per category", n_rows)
        train_mask = _allocate_per_category(df[label_col], n_train, seed)
        train, test = df.loc[train_mask], df.loc[~train_mask]
    logger.info("Partitioned %d rows into %d training and %d test rows (seed=%d)", n_rows, len(train), len(test), seed)

    return PartitionResult(
        train=train,
        test=test,
        label_col=label_col,
        train_fraction=train_fraction,
        seed=seed,
    )


def _allocate_per_category(labels: pd.Series, n_train: int, seed: int) -> np.ndarray:
    """Boolean training mask with ``n_train`` rows spread over the categories.

    Each category first gets ``floor(p * n_c)`` rows; the remaining rows go to
    the categories with the largest fractional quota, ties broken by the seeded
    generator. Rows within a category are drawn by a seeded permutation.
    """
    rng = np.random.default_rng(seed)
    codes, categories = pd.factorize(labels, sort=True)
    sizes = np.bincount(codes, minlength=len(categories))

    quotas = sizes * (n_train / len(labels))
    alloc = np.floor(quotas).astype(int)
    remaining = n_train - int(alloc.sum())
    order = np.lexsort((rng.random(len(categories)), -(quotas - alloc)))
    alloc[order[:remaining]] += 1

    mask = np.zeros(len(labels), dtype=bool)
    for code, take in enumerate(alloc):
        positions = np.flatnonzero(codes == code)
        mask[rng.permutation(positions)[:take]] = True
    return mask
