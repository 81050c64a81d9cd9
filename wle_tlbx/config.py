"""Run configuration of the classification pipeline."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from wle_tlbx.analysis.cv_trainer import METHODS
from wle_tlbx.data.wle_columns import WLEColumn


@dataclass(frozen=True)
class PipelineConfig:
    """Parameters of one pipeline run.

    Attributes:
        seed: Seed of the partition, the k-means initialisation and the fold shuffling.
        train_fraction: Share of rows in the training subset, in (0, 1).
        cutoff: Absolute correlation above which one predictor of a pair is dropped.
        identifier_columns: Columns removed by name before any other filtering.
        n_clusters: Number of k-means clusters of the diagnostic baseline.
        kmeans_max_iter: Iteration cap of the k-means baseline.
        n_folds: Number of cross-validation folds.
        methods: Classifiers to train, in report order.
        rf_n_estimators: Trees per random forest.
        n_jobs: Estimator parallelism passed to scikit-learn (``None`` = 1 core).
        param_grids: Optional per-method hyperparameter grids replacing the defaults.
        training_csv: Labelled input table (``None`` = ``pml-training.csv`` in the data directory).
        testing_csv: Unlabeled cases to predict (``None`` = ``pml-testing.csv`` if it exists).
        output_dir: Directory for ``report.txt`` and figures (``None`` = do not save).
    """

    seed: int = 300
    train_fraction: float = 0.7
    cutoff: float = 0.7
    identifier_columns: tuple[str, ...] = field(default_factory=lambda: tuple(WLEColumn.identifier_columns()))
    n_clusters: int = 5
    kmeans_max_iter: int = 300
    n_folds: int = 3
    methods: tuple[str, ...] = METHODS
    rf_n_estimators: int = 100
    n_jobs: int | None = None
    param_grids: Mapping[str, Mapping[str, Sequence[object]]] = field(default_factory=dict)
    training_csv: Path | None = None
    testing_csv: Path | None = None
    output_dir: Path | None = None

    def __post_init__(self) -> None:
        if not 0.0 < self.train_fraction < 1.0:
            raise ValueError(f"train_fraction must lie in (0, 1), got {self.train_fraction}.")
        if not 0.0 <= self.cutoff <= 1.0:
            raise ValueError(f"cutoff must lie in [0, 1], got {self.cutoff}.")
        if self.n_clusters < 1:
            raise ValueError(f"n_clusters must be positive, got {self.n_clusters}.")
        if self.n_folds < 2:
            raise ValueError(f"n_folds must be at least 2, got {self.n_folds}.")
        if not self.methods:
            raise ValueError("At least one method is required.")
        unknown = [method for method in (*self.methods, *self.param_grids) if method not in METHODS]
        if unknown:
            raise ValueError(f"Unknown methods {unknown}. Use any of {list(METHODS)}.")

    def param_grid(self, method: str) -> Mapping[str, Sequence[object]] | None:
        """Grid override for ``method`` (``None`` selects the default search space)."""
        return self.param_grids.get(method)


DEFAULT_PIPELINE_CFG = PipelineConfig()


__all__ = ["DEFAULT_PIPELINE_CFG", "PipelineConfig"]
