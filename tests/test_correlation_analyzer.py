"""Tests for CorrelationAnalyzer and correlation pruning."""

import numpy as np
import pandas as pd
import pytest

from wle_tlbx.analysis.correlation_analyzer import CorrelationAnalyzer, CorrelationResult, find_correlated_columns
from wle_tlbx.data.views import DatasetView
from wle_tlbx.errors import NonSquareCorrelation


def _corr_frame(values: list[list[float]], cols: list[str]) -> pd.DataFrame:
    return pd.DataFrame(values, index=cols, columns=cols)


class TestFindCorrelatedColumns:
    """Greedy pruning of a correlation matrix."""

    def test_drops_column_with_higher_mean_correlation(self) -> None:
        """``a`` correlates with both others, so it goes and ``b``/``c`` stay."""
        corr = _corr_frame(
            [
                [1.0, 0.9, 0.8],
                [0.9, 1.0, 0.1],
                [0.8, 0.1, 1.0],
            ],
            ["a", "b", "c"],
        )
        assert find_correlated_columns(corr, cutoff=0.7) == ["a"]

    def test_tie_drops_later_column(self) -> None:
        corr = _corr_frame([[1.0, 0.9], [0.9, 1.0]], ["a", "b"])
        assert find_correlated_columns(corr, cutoff=0.7) == ["b"]

    def test_cutoff_is_strict(self) -> None:
        corr = _corr_frame([[1.0, 0.7], [0.7, 1.0]], ["a", "b"])
        assert find_correlated_columns(corr, cutoff=0.7) == []

    def test_negative_correlation_counts(self) -> None:
        corr = _corr_frame([[1.0, -0.95], [-0.95, 1.0]], ["a", "b"])
        assert len(find_correlated_columns(corr, cutoff=0.7)) == 1

    def test_retained_columns_below_cutoff(self) -> None:
        """No retained pair exceeds the cutoff on random correlated data."""
        rng = np.random.default_rng(3)
        base = rng.normal(size=(200, 3))
        data = pd.DataFrame(
            np.column_stack([base, base[:, 0] + 0.3 * rng.normal(size=200), base[:, 1] - base[:, 2]]),
            columns=["a", "b", "c", "d", "e"],
        )
        corr = data.corr()
        dropped = find_correlated_columns(corr, cutoff=0.7)
        retained = [col for col in corr.columns if col not in dropped]

        sub = corr.loc[retained, retained].abs().to_numpy()
        np.fill_diagonal(sub, 0.0)
        assert dropped
        assert (sub <= 0.7).all()

    def test_non_square_matrix(self) -> None:
        corr = pd.DataFrame([[1.0, 0.5, 0.1], [0.5, 1.0, 0.2]], index=["a", "b"], columns=["a", "b", "c"])
        with pytest.raises(NonSquareCorrelation, match="square"):
            find_correlated_columns(corr)

    def test_single_column(self) -> None:
        with pytest.raises(NonSquareCorrelation, match="at least two"):
            find_correlated_columns(_corr_frame([[1.0]], ["a"]))


class TestCorrelationAnalyzer:
    """Test CorrelationAnalyzer functionality."""

    @pytest.fixture
    def sample_view(self) -> DatasetView:
        """Create a sample DatasetView for testing."""
        data = pd.DataFrame(
            {
                "feature1": [1.0, 2.0, 3.0, 4.0, 5.0],
                "feature2": [2.0, 4.0, 6.0, 8.0, 10.5],  # Near-perfect positive correlation
                "feature3": [5.0, 3.0, 4.0, 1.0, 2.0],
                "classe": pd.Categorical(["A", "B", "A", "B", "A"]),
            },
        )
        return DatasetView(
            df=data,
            pretty_by_col={"feature1": "Feature 1", "feature2": "Feature 2", "feature3": "Feature 3"},
            numeric_cols=["feature1", "feature2", "feature3"],
            label_col="classe",
        )

    def test_get_correlation_matrix(self, sample_view: DatasetView) -> None:
        """The label never enters the matrix."""
        corr = CorrelationAnalyzer(sample_view).get_correlation_matrix()

        assert corr.shape == (3, 3)
        assert "classe" not in corr.columns
        np.testing.assert_allclose(np.diag(corr), 1.0)
        assert corr.loc["feature1", "feature2"] > 0.99

    def test_top_pairs_sorted(self, sample_view: DatasetView) -> None:
        pairs = CorrelationAnalyzer(sample_view).get_top_correlated_pairs(n=None)

        assert len(pairs) == 3
        assert pairs["abs_correlation"].is_monotonic_decreasing
        assert {"feature_a", "feature_b", "correlation", "abs_correlation", "pair"} <= set(pairs.columns)

    def test_pairs_above_cutoff(self, sample_view: DatasetView) -> None:
        pairs = CorrelationAnalyzer(sample_view, cutoff=0.95).get_pairs_above_cutoff()
        assert len(pairs) == 1
        assert set(pairs.loc[0, ["feature_a", "feature_b"]]) == {"feature1", "feature2"}

    def test_fit_result(self, sample_view: DatasetView) -> None:
        result = CorrelationAnalyzer(sample_view, cutoff=0.95).fit().result()

        assert isinstance(result, CorrelationResult)
        assert result.cutoff == 0.95
        assert len(result.correlated) == 1
        assert result.correlated[0] in {"feature1", "feature2"}
        assert "feature3" in result.retained

    def test_result_before_fit(self, sample_view: DatasetView) -> None:
        with pytest.raises(ValueError, match="fit"):
            CorrelationAnalyzer(sample_view).result()

    def test_invalid_cutoff(self, sample_view: DatasetView) -> None:
        with pytest.raises(ValueError, match="cutoff"):
            CorrelationAnalyzer(sample_view, cutoff=1.5)

    def test_too_few_numeric_columns(self) -> None:
        view = DatasetView(
            df=pd.DataFrame({"only": [1.0, 2.0, 3.0]}),
            pretty_by_col={},
            numeric_cols=["only"],
        )
        with pytest.raises(NonSquareCorrelation):
            CorrelationAnalyzer(view).fit()
