"""Tests for the model registry."""

import pytest

from wle_tlbx.analysis.model_registry import ModelEntry, ModelRegistry


@pytest.fixture
def registry() -> ModelRegistry:
    return ModelRegistry(n_folds=3, random_state=300, rf_n_estimators=10)


class TestModelRegistry:
    """Memoized fitting, evaluation and comparison."""

    def test_fit_is_memoized(self, registry: ModelRegistry, filtered_split, small_grids) -> None:
        train_view, _, _ = filtered_split
        grid = small_grids["random_forest"]

        first = registry.fit(train_view, method="random_forest", param_grid=grid)
        second = registry.fit(train_view, method="random_forest", param_grid=grid)
        refit = registry.fit(train_view, method="random_forest", param_grid=grid, refit=True)

        assert first is second
        assert refit is not first
        assert len(registry) == 1
        assert registry.get("random_forest").artifact is refit

    def test_custom_name(self, registry: ModelRegistry, filtered_split, small_grids) -> None:
        train_view, _, _ = filtered_split
        registry.fit(train_view, method="random_forest", name="rf_small", param_grid=small_grids["random_forest"])
        assert [entry.name for entry in registry] == ["rf_small"]

    def test_evaluate_compare_best(self, registry: ModelRegistry, filtered_split, small_grids) -> None:
        train_view, test_view, _ = filtered_split
        for method in ("gradient_boosting", "random_forest"):
            registry.fit(train_view, method=method, param_grid=small_grids[method])
            registry.evaluate_on(method, test_view)

        comparison = registry.compare()
        assert set(comparison.index) == {"gradient_boosting", "random_forest"}
        assert {"cv_accuracy", "test_accuracy", "test_kappa"} <= set(comparison.columns)
        assert comparison["test_accuracy"].is_monotonic_decreasing

        best = registry.best()
        assert best.evaluation is not None
        assert best.evaluation.accuracy == comparison["test_accuracy"].max()

    def test_best_without_evaluation(self, registry: ModelRegistry) -> None:
        with pytest.raises(ValueError, match="No evaluated models"):
            registry.best()

    def test_get_unknown(self, registry: ModelRegistry) -> None:
        with pytest.raises(KeyError, match="Unknown model"):
            registry.get("missing")

    def test_add_duplicate(self, registry: ModelRegistry, filtered_split, small_grids) -> None:
        train_view, _, _ = filtered_split
        artifact = registry.fit(train_view, method="random_forest", param_grid=small_grids["random_forest"])
        with pytest.raises(KeyError, match="already exists"):
            registry.add(ModelEntry(name="random_forest", artifact=artifact))

    def test_compare_empty(self, registry: ModelRegistry) -> None:
        assert registry.compare().empty
