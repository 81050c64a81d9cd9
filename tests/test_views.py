"""Tests for DatasetView."""

import pandas as pd
import pytest

from wle_tlbx.data.views import DatasetView


class TestDatasetView:
    """Test DatasetView functionality."""

    @pytest.fixture
    def sample_view(self) -> DatasetView:
        """Create a sample DatasetView for testing."""
        data = pd.DataFrame(
            {
                "roll_belt": [1.0, 2.0, 3.0],
                "pitch_belt": [4.0, 5.0, 6.0],
                "classe": pd.Categorical(["A", "B", "C"]),
            },
        )
        return DatasetView(
            df=data,
            pretty_by_col={"roll_belt": "Roll Belt", "pitch_belt": "Pitch Belt", "classe": "Exercise Class"},
            numeric_cols=["roll_belt", "pitch_belt"],
            label_col="classe",
        )

    def test_view_creation(self, sample_view: DatasetView) -> None:
        """Test creating a DatasetView."""
        assert sample_view.n_rows == 3
        assert list(sample_view.df.columns) == ["roll_belt", "pitch_belt", "classe"]
        assert sample_view.label_col == "classe"
        assert sample_view.has_labels

    def test_view_is_frozen(self, sample_view: DatasetView) -> None:
        """Test that DatasetView is immutable."""
        with pytest.raises(AttributeError):
            sample_view.label_col = "roll_belt"  # type: ignore[misc]

    def test_features_property(self, sample_view: DatasetView) -> None:
        """Test features property returns numeric columns."""
        features = sample_view.features
        assert list(features.columns) == ["roll_belt", "pitch_belt"]
        assert len(features) == 3

    def test_features_without_numeric_cols_excludes_label(self) -> None:
        """With no numeric columns declared, every non-label column is a feature."""
        data = pd.DataFrame({"a": [1, 2, 3], "b": [4, 5, 6], "classe": ["A", "B", "A"]})
        view = DatasetView(df=data, pretty_by_col={}, numeric_cols=[], label_col="classe")
        assert list(view.features.columns) == ["a", "b"]

    def test_labels(self, sample_view: DatasetView) -> None:
        assert sample_view.labels.tolist() == ["A", "B", "C"]

    def test_view_without_labels(self) -> None:
        """Accessing labels of an unlabeled view raises."""
        data = pd.DataFrame({"x": [1, 2, 3], "y": [4, 5, 6]})
        view = DatasetView(df=data, pretty_by_col={"x": "X", "y": "Y"}, numeric_cols=["x", "y"])
        assert view.label_col is None
        assert not view.has_labels
        with pytest.raises(ValueError, match="no label column"):
            _ = view.labels
