"""Cross-validated training of the ensemble classifiers.

Two methods are supported:

- ``gradient_boosting``: :class:`sklearn.ensemble.GradientBoostingClassifier`, an
  additive ensemble of shallow regression trees fit sequentially, each one on
  the gradient of the loss (the residual error) of the ensemble so far.
- ``random_forest``: :class:`sklearn.ensemble.RandomForestClassifier`, trees fit
  on bootstrap resamples with a random subset of predictors per split;
  predictions are the majority vote (averaged class probabilities) of the trees.

Hyperparameters are selected by :class:`sklearn.model_selection.GridSearchCV`
over stratified k folds: every candidate is fit on k-1 folds and scored
(accuracy) on the held-out fold, the candidate with the best mean score is
refit on the full training table.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Self

import numpy as np
import pandas as pd
from sklearn.base import ClassifierMixin
from sklearn.ensemble import GradientBoostingClassifier, RandomForestClassifier
from sklearn.model_selection import GridSearchCV, StratifiedKFold

from wle_tlbx.data.views import DatasetView
from wle_tlbx.errors import InsufficientFoldSize

from .base_analyser import BaseAnalyser


logger = logging.getLogger(__name__)

Method = Literal["gradient_boosting", "random_forest"]
METHODS: tuple[str, ...] = ("gradient_boosting", "random_forest")


@dataclass(frozen=True)
class CrossValidationConfig:
    """Fold layout used to select hyperparameters."""

    n_folds: int = 3
    shuffle: bool = True
    random_state: int | None = None
    scoring: str = "accuracy"

    def splitter(self) -> StratifiedKFold:
        return StratifiedKFold(
            n_splits=self.n_folds,
            shuffle=self.shuffle,
            random_state=self.random_state if self.shuffle else None,
        )


@dataclass(frozen=True)
class ModelArtifact:
    """Fitted classifier together with the cross-validation that produced it.

    Write-once: created by :class:`CrossValidatedTrainer`, consumed by the
    evaluator and case predictor.

    Attributes:
        method: Method identifier (``gradient_boosting`` or ``random_forest``).
        estimator: Estimator refit on the full training table with ``best_params``.
        cv_config: Fold configuration of the hyperparameter search.
        best_params: Selected hyperparameters.
        fold_scores: Held-out score of the selected candidate on each fold.
        cv_results: One row per candidate with mean/std held-out score and rank.
        classes: Label categories seen during training.
        predictors: Predictor columns, in the order the estimator expects them.
        label_col: Name of the label column.
    """

    method: str
    estimator: ClassifierMixin
    cv_config: CrossValidationConfig
    best_params: Mapping[str, object]
    fold_scores: tuple[float, ...]
    cv_results: pd.DataFrame
    classes: tuple[str, ...]
    predictors: tuple[str, ...]
    label_col: str = field(default="classe")

    @property
    def mean_cv_score(self) -> float:
        return float(np.mean(self.fold_scores))

    def design_matrix(self, df: pd.DataFrame) -> np.ndarray:
        """Predictor matrix of ``df`` in training column order.

        Raises:
            ValueError: If predictors are missing from ``df``.
        """
        missing = [col for col in self.predictors if col not in df.columns]
        if missing:
            raise ValueError(f"Table lacks predictor columns used in training: {missing}")
        return design_matrix(df, list(self.predictors))

    def predict(self, df: pd.DataFrame) -> pd.Series:
        """Predicted label per row of ``df`` (index preserved)."""
        predicted = self.estimator.predict(self.design_matrix(df))
        return pd.Series(
            pd.Categorical(predicted, categories=list(self.classes)),
            index=df.index,
            name=f"predicted_{self.label_col}",
        )


def design_matrix(df: pd.DataFrame, predictors: list[str]) -> np.ndarray:
    """Float matrix of ``predictors``; categorical predictors enter as their category codes."""
    columns = [
        df[col].cat.codes.to_numpy(dtype=float)
        if isinstance(df[col].dtype, pd.CategoricalDtype)
        else df[col].to_numpy(dtype=float)
        for col in predictors
    ]
    if not columns:
        return np.empty((len(df), 0))
    return np.column_stack(columns)


def check_fold_sizes(labels: pd.Series, n_folds: int) -> None:
    """Validate that stratified ``n_folds``-fold cross-validation is feasible.

    Raises:
        ValueError: If fewer than two folds are requested.
        InsufficientFoldSize: If a fold would hold fewer rows than there are
            label categories, i.e. some category has fewer rows than folds.
    """
    if n_folds < 2:
        raise ValueError(f"Cross-validation needs at least 2 folds, got {n_folds}.")

    counts = pd.Series(np.asarray(labels)).value_counts()
    n_categories = len(counts)
    if len(labels) // n_folds < n_categories:
        raise InsufficientFoldSize(
            f"{len(labels)} rows split into {n_folds} folds leave fewer rows per fold than the "
            f"{n_categories} label categories.",
        )
    sparse = counts[counts < n_folds]
    if not sparse.empty:
        raise InsufficientFoldSize(
            f"Categories {sparse.index.tolist()} have {sparse.tolist()} rows, fewer than the {n_folds} folds; "
            "some folds would miss these categories.",
        )


def random_forest_max_features(n_features: int) -> list[int]:
    """Candidate predictors-per-split: 2, the midpoint ``(2 + p) // 2`` and all ``p`` predictors."""
    return sorted({min(2, n_features), max(1, (2 + n_features) // 2), n_features})


def default_param_grid(method: str, n_features: int) -> dict[str, list[object]]:
    """Default search space per method."""
    if method == "gradient_boosting":
        return {"n_estimators": [50, 100, 150], "max_depth": [1, 2, 3], "learning_rate": [0.1]}
    if method == "random_forest":
        return {"max_features": random_forest_max_features(n_features)}
    raise ValueError(f"Unknown method '{method}'. Use one of {list(METHODS)}.")


def make_estimator(
    method: str,
    *,
    random_state: int | None = None,
    rf_n_estimators: int = 100,
    n_jobs: int | None = None,
) -> ClassifierMixin:
    """Unfitted estimator for ``method``."""
    if method == "gradient_boosting":
        return GradientBoostingClassifier(random_state=random_state)
    if method == "random_forest":
        return RandomForestClassifier(n_estimators=rf_n_estimators, random_state=random_state, n_jobs=n_jobs)
    raise ValueError(f"Unknown method '{method}'. Use one of {list(METHODS)}.")


class CrossValidatedTrainer(BaseAnalyser):
    """Fit one classifier with k-fold cross-validated hyperparameter selection.

    All numeric (and categorical) columns of the view other than the label are
    used as predictors, so the view should come from the predictor filter.

    Example:
        >>> trainer = CrossValidatedTrainer(train_view, method="random_forest", n_folds=3, random_state=300)
        >>> artifact = trainer.fit().result()
        >>> artifact.best_params, artifact.mean_cv_score
    """

    def __init__(
        self,
        view: DatasetView,
        method: Method | str,
        *,
        n_folds: int = 3,
        random_state: int | None = None,
        param_grid: Mapping[str, Sequence[object]] | None = None,
        rf_n_estimators: int = 100,
        n_jobs: int | None = None,
    ) -> None:
        if method not in METHODS:
            raise ValueError(f"Unknown method '{method}'. Use one of {list(METHODS)}.")
        if not view.has_labels:
            raise ValueError("CrossValidatedTrainer requires a view with a label column.")
        self._view = view
        self.method = method
        self.cv_config = CrossValidationConfig(n_folds=n_folds, random_state=random_state)
        self.param_grid = param_grid
        self.rf_n_estimators = rf_n_estimators
        self.n_jobs = n_jobs
        self._artifact: ModelArtifact | None = None

    @property
    def predictors(self) -> list[str]:
        return [
            col
            for col in self._view.df.columns
            if col != self._view.label_col
            and (
                pd.api.types.is_numeric_dtype(self._view.df[col].dtype)
                or isinstance(self._view.df[col].dtype, pd.CategoricalDtype)
            )
        ]

    def fit(self) -> Self:
        predictors = self.predictors
        if not predictors:
            raise ValueError("No predictor columns available for training.")
        labels = self._view.labels
        if labels.isna().any():
            raise ValueError(f"Label column '{self._view.label_col}' contains missing values.")
        check_fold_sizes(labels, self.cv_config.n_folds)

        x = design_matrix(self._view.df, predictors)
        if np.isnan(x).any():
            raise ValueError("Predictors contain missing values; filter predictors first.")
        y = np.asarray(labels.astype(str))

        grid = (
            dict(self.param_grid) if self.param_grid is not None else default_param_grid(self.method, len(predictors))
        )
        search = GridSearchCV(
            make_estimator(
                self.method,
                random_state=self.cv_config.random_state,
                rf_n_estimators=self.rf_n_estimators,
                n_jobs=self.n_jobs,
            ),
            param_grid=grid,
            scoring=self.cv_config.scoring,
            cv=self.cv_config.splitter(),
            refit=True,
            error_score="raise",
        )
        logger.info(
            "Training %s on %d rows x %d predictors with %d-fold CV over %s",
            self.method,
            x.shape[0],
            x.shape[1],
            self.cv_config.n_folds,
            grid,
        )
        search.fit(x, y)

        best = search.best_index_
        fold_scores = tuple(
            float(search.cv_results_[f"split{fold}_test_score"][best]) for fold in range(self.cv_config.n_folds)
        )
        for fold, score in enumerate(fold_scores):
            logger.debug("%s fold %d held-out %s: %.4f", self.method, fold, self.cv_config.scoring, score)
        logger.info(
            "%s selected %s (mean CV %s %.4f)",
            self.method,
            search.best_params_,
            self.cv_config.scoring,
            search.best_score_,
        )

        cv_results = pd.DataFrame(
            {
                "params": search.cv_results_["params"],
                "mean_test_score": search.cv_results_["mean_test_score"],
                "std_test_score": search.cv_results_["std_test_score"],
                "rank_test_score": search.cv_results_["rank_test_score"],
            },
        ).sort_values("rank_test_score", kind="stable").reset_index(drop=True)

        self._artifact = ModelArtifact(
            method=self.method,
            estimator=search.best_estimator_,
            cv_config=self.cv_config,
            best_params=MappingProxyType(dict(search.best_params_)),
            fold_scores=fold_scores,
            cv_results=cv_results,
            classes=tuple(str(c) for c in search.best_estimator_.classes_),
            predictors=tuple(predictors),
            label_col=self._view.label_col,
        )
        return self

    def result(self) -> ModelArtifact:
        if self._artifact is None:
            raise ValueError("Must call fit() before result()")
        return self._artifact
