"""Analysis modules: predictor selection, clustering baseline, training and evaluation."""

from .correlation_analyzer import CorrelationAnalyzer, CorrelationResult, find_correlated_columns
from .cv_trainer import (
    METHODS,
    CrossValidatedTrainer,
    CrossValidationConfig,
    ModelArtifact,
    check_fold_sizes,
    default_param_grid,
)
from .evaluator import EvaluationResult, Evaluator, predict_cases
from .kmeans_baseline import ClusteringResult, KMeansBaseline
from .model_registry import ModelEntry, ModelRegistry
from .predictor_filter import PredictorFilter, PredictorFilterResult


__all__ = [
    "METHODS",
    "ClusteringResult",
    "CorrelationAnalyzer",
    "CorrelationResult",
    "CrossValidatedTrainer",
    "CrossValidationConfig",
    "EvaluationResult",
    "Evaluator",
    "KMeansBaseline",
    "ModelArtifact",
    "ModelEntry",
    "ModelRegistry",
    "PredictorFilter",
    "PredictorFilterResult",
    "check_fold_sizes",
    "default_param_grid",
    "find_correlated_columns",
    "predict_cases",
]
