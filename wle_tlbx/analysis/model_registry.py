"""Named collection of fitted models with memoized fitting and held-out comparison."""

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field

import pandas as pd

from wle_tlbx.data.views import DatasetView

from .cv_trainer import CrossValidatedTrainer, ModelArtifact
from .evaluator import EvaluationResult, Evaluator


@dataclass
class ModelEntry:
    """Typed registry entry: a fitted artifact and, once evaluated, its held-out result."""

    name: str
    artifact: ModelArtifact
    evaluation: EvaluationResult | None = None


@dataclass
class ModelRegistry:
    """Registry that memoizes fitted models and their evaluations by name.

    Fitting a name that is already registered returns the cached artifact,
    so re-rendering a report does not retrain the ensembles. Pass
    ``refit=True`` to force a new fit.
    """

    n_folds: int = 3
    random_state: int | None = None
    rf_n_estimators: int = 100
    n_jobs: int | None = None
    models: dict[str, ModelEntry] = field(default_factory=dict)

    def add(self, entry: ModelEntry, *, overwrite: bool = False) -> None:
        """Add an entry to the registry (optionally overwriting by name)."""
        if entry.name in self.models and not overwrite:
            raise KeyError(f"Model '{entry.name}' already exists in registry.")
        self.models[entry.name] = entry

    def get(self, name: str) -> ModelEntry:
        """Retrieve a model entry by name."""
        if name not in self.models:
            raise KeyError(f"Unknown model '{name}'.")
        return self.models[name]

    def fit(
        self,
        view: DatasetView,
        *,
        method: str,
        name: str | None = None,
        param_grid: Mapping[str, Sequence[object]] | None = None,
        refit: bool = False,
    ) -> ModelArtifact:
        """Fit a cross-validated model and cache it by name.

        Args:
            view: Filtered training view (predictors + label).
            method: ``gradient_boosting`` or ``random_forest``.
            name: Unique registry name (defaults to the method identifier).
            param_grid: Optional hyperparameter grid replacing the default one.
            refit: If True, refit even if a model with ``name`` exists.
        """
        name = name or method
        if name in self.models and not refit:
            return self.models[name].artifact

        artifact = (
            CrossValidatedTrainer(
                view,
                method=method,
                n_folds=self.n_folds,
                random_state=self.random_state,
                param_grid=param_grid,
                rf_n_estimators=self.rf_n_estimators,
                n_jobs=self.n_jobs,
            )
            .fit()
            .result()
        )
        self.add(ModelEntry(name=name, artifact=artifact), overwrite=True)
        return artifact

    def evaluate_on(self, name: str, view: DatasetView) -> EvaluationResult:
        """Evaluate a registered model on a labelled view and cache the result."""
        entry = self.get(name)
        entry.evaluation = Evaluator(entry.artifact, view).fit().result()
        return entry.evaluation

    def compare(self, *, sort_by: str = "test_accuracy") -> pd.DataFrame:
        """Return a comparison table for all cached models."""
        rows = []
        for entry in self.models.values():
            row = {
                "model": entry.name,
                "method": entry.artifact.method,
                "best_params": dict(entry.artifact.best_params),
                "cv_accuracy": entry.artifact.mean_cv_score,
            }
            if entry.evaluation is not None:
                row.update(
                    {
                        "test_accuracy": entry.evaluation.accuracy,
                        "test_kappa": entry.evaluation.kappa,
                        "test_n_obs": entry.evaluation.n_obs,
                    },
                )
            rows.append(row)
        df = pd.DataFrame(rows).set_index("model") if rows else pd.DataFrame()
        if sort_by in df.columns:
            return df.sort_values(sort_by, ascending=False, kind="stable")
        return df

    def best(self) -> ModelEntry:
        """Entry with the highest held-out accuracy (first registered wins ties).

        Raises:
            ValueError: If no model has been evaluated yet.
        """
        evaluated = [entry for entry in self.models.values() if entry.evaluation is not None]
        if not evaluated:
            raise ValueError("No evaluated models in registry; call evaluate_on() first.")
        return max(evaluated, key=lambda entry: entry.evaluation.accuracy)

    def __iter__(self) -> Iterator[ModelEntry]:
        return iter(self.models.values())

    def __len__(self) -> int:
        return len(self.models)
