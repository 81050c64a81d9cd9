"""Tests for the stratified train/test partition."""

import numpy as np
import pandas as pd
import pytest

from wle_tlbx.data import PartitionResult, stratified_split


@pytest.fixture
def balanced_df() -> pd.DataFrame:
    """100 rows, 20 per category."""
    rng = np.random.default_rng(7)
    return pd.DataFrame(
        {
            "row_id": np.arange(100),
            "value": rng.normal(size=100),
            "classe": pd.Categorical(np.repeat(list("ABCDE"), 20)),
        },
    )


class TestStratifiedSplit:
    """Partition sizes, stratification and reproducibility."""

    def test_sizes_and_stratification(self, balanced_df: pd.DataFrame) -> None:
        """seed 300, p = 0.7 on 100 balanced rows gives 70 training rows, 14 per category."""
        parts = stratified_split(balanced_df, "classe", train_fraction=0.7, seed=300)

        assert isinstance(parts, PartitionResult)
        assert abs(len(parts.train) - 70) <= 1
        per_class = parts.train["classe"].value_counts()
        assert all(abs(count - 14) <= 1 for count in per_class)

    def test_rows_partition_input(self, balanced_df: pd.DataFrame) -> None:
        parts = stratified_split(balanced_df, "classe", seed=300)

        assert parts.n_rows == len(balanced_df)
        assert set(parts.train["row_id"]).isdisjoint(parts.test["row_id"])
        assert set(parts.train.index) | set(parts.test.index) == set(balanced_df.index)

    def test_same_seed_same_partition(self, balanced_df: pd.DataFrame) -> None:
        first = stratified_split(balanced_df, "classe", seed=300)
        second = stratified_split(balanced_df, "classe", seed=300)
        other = stratified_split(balanced_df, "classe", seed=301)

        assert first.train.index.equals(second.train.index)
        assert not first.train.index.equals(other.train.index)

    def test_input_not_modified(self, balanced_df: pd.DataFrame) -> None:
        before = balanced_df.copy()
        stratified_split(balanced_df, "classe", seed=300)
        pd.testing.assert_frame_equal(balanced_df, before)

    @pytest.mark.parametrize("fraction", [0.0, 1.0, -0.2, 1.5])
    def test_fraction_outside_unit_interval(self, balanced_df: pd.DataFrame, fraction: float) -> None:
        with pytest.raises(ValueError, match="train_fraction"):
            stratified_split(balanced_df, "classe", train_fraction=fraction)

    def test_missing_label_column(self, balanced_df: pd.DataFrame) -> None:
        with pytest.raises(ValueError, match="not found"):
            stratified_split(balanced_df, "label")

    def test_summary_shares(self, balanced_df: pd.DataFrame) -> None:
        summary = stratified_split(balanced_df, "classe", seed=300).summary()

        assert list(summary.columns) == ["train", "test", "train_share", "test_share"]
        assert summary["train"].sum() + summary["test"].sum() == 100
        assert summary["train_share"].sum() == pytest.approx(1.0)
        np.testing.assert_allclose(summary["train_share"], 0.2, atol=0.02)

    def test_dataset_split(self, wle_dataset) -> None:
        """The dataset wrapper splits on its label column."""
        parts = wle_dataset.split(train_fraction=0.7, seed=300)
        assert len(parts.train) == 140
        assert parts.label_col == "classe"


class TestInfeasibleStratification:
    """Fractions and tables where a stratified shuffle cannot satisfy every category."""

    @pytest.mark.parametrize("fraction", [0.01, 0.05, 0.95, 0.99])
    def test_extreme_fractions(self, balanced_df: pd.DataFrame, fraction: float) -> None:
        parts = stratified_split(balanced_df, "classe", train_fraction=fraction, seed=300)

        assert len(parts.train) == round(fraction * 100)
        assert parts.n_rows == len(balanced_df)
        assert set(parts.train["row_id"]).isdisjoint(parts.test["row_id"])

    def test_singleton_category(self) -> None:
        df = pd.DataFrame({"row_id": np.arange(11), "classe": pd.Categorical(list("AAAAABBBBBC"))})
        parts = stratified_split(df, "classe", train_fraction=0.7, seed=300)

        assert len(parts.train) == 8
        assert len(parts.train) + len(parts.test) == 11
        assert set(parts.train["row_id"]).isdisjoint(parts.test["row_id"])
        counts = parts.train["classe"].value_counts()
        assert counts["C"] == 1
        assert counts["A"] + counts["B"] == 7

    def test_fallback_is_reproducible(self, balanced_df: pd.DataFrame) -> None:
        first = stratified_split(balanced_df, "classe", train_fraction=0.03, seed=300)
        second = stratified_split(balanced_df, "classe", train_fraction=0.03, seed=300)

        assert first.train.index.equals(second.train.index)
        assert first.train["classe"].nunique() == 3
