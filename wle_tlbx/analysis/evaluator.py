"""Held-out evaluation of fitted classifiers and prediction of unlabeled cases."""

import logging
from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd
from scipy import stats
from sklearn.metrics import accuracy_score, cohen_kappa_score, confusion_matrix, precision_recall_fscore_support

from wle_tlbx.data.views import DatasetView
from wle_tlbx.errors import LabelMismatch

from .base_analyser import BaseAnalyser
from .cv_trainer import ModelArtifact


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationResult:
    r"""Confusion matrix and accuracy statistics of one model on a labelled table.

    - accuracy :math:`= \frac{\#\{\hat{y}_i = y_i\}}{n}`
    - Cohen's :math:`\kappa = \frac{p_o - p_e}{1 - p_e}` (agreement beyond chance)
    - exact Clopper-Pearson confidence interval of the accuracy, from
      :meth:`scipy.stats.binomtest(...).proportion_ci <scipy.stats._result_classes.BinomTestResult.proportion_ci>`
    - no-information rate: share of the most frequent true category

    Attributes:
        method: Method identifier of the evaluated artifact.
        predictions: Predicted label per row (index of the test table).
        confusion_matrix: Counts indexed by true category (rows) and predicted category (columns).
        accuracy: Correct predictions / rows, in [0, 1].
        kappa: Cohen's kappa.
        accuracy_ci: Lower/upper bound of the accuracy confidence interval.
        confidence_level: Level of ``accuracy_ci``.
        no_information_rate: Accuracy of always predicting the majority category.
        per_class: Precision, recall, F1 and support per category.
    """

    method: str
    predictions: pd.Series
    confusion_matrix: pd.DataFrame
    accuracy: float
    kappa: float
    accuracy_ci: tuple[float, float]
    confidence_level: float
    no_information_rate: float
    per_class: pd.DataFrame

    @property
    def n_obs(self) -> int:
        return int(self.confusion_matrix.to_numpy().sum())

    @property
    def n_correct(self) -> int:
        return int(np.trace(self.confusion_matrix.to_numpy()))

    def summary(self) -> str:
        """Text block with the confusion matrix and overall statistics."""
        low, high = self.accuracy_ci
        lines = [
            f"Confusion Matrix ({self.method})",
            "Rows: reference, columns: prediction",
            self.confusion_matrix.to_string(),
            "",
            f"Accuracy : {self.accuracy:.4f}",
            f"{self.confidence_level:.0%} CI   : ({low:.4f}, {high:.4f})",
            f"No Information Rate : {self.no_information_rate:.4f}",
            f"Kappa : {self.kappa:.4f}",
            "",
            "Statistics by Class:",
            self.per_class.to_string(float_format=lambda v: f"{v:.4f}"),
        ]
        return "\n".join(lines)

    def plot_confusion_matrix(self, **kwargs: object):
        """Heatmap of the confusion matrix."""
        from wle_tlbx.plotting.evaluation_plots import plot_confusion_matrix  # noqa: PLC0415

        return plot_confusion_matrix(self, **kwargs)


class Evaluator(BaseAnalyser):
    """Apply a :class:`ModelArtifact` to a labelled test view.

    Neither the artifact nor the view is modified.

    Example:
        >>> result = Evaluator(artifact, test_view).fit().result()
        >>> print(result.summary())
    """

    def __init__(self, artifact: ModelArtifact, view: DatasetView, *, confidence_level: float = 0.95) -> None:
        if not view.has_labels:
            raise ValueError("Evaluator requires a view with a label column.")
        if not 0.0 < confidence_level < 1.0:
            raise ValueError(f"confidence_level must lie in (0, 1), got {confidence_level}.")
        self._artifact = artifact
        self._view = view
        self.confidence_level = confidence_level
        self._result: EvaluationResult | None = None

    def check_labels(self) -> None:
        """Raise :class:`LabelMismatch` if the test labels are not a subset of the training categories."""
        labels = self._view.labels
        if labels.isna().any():
            raise ValueError(f"Label column '{self._view.label_col}' contains missing values.")
        unseen = sorted(set(labels.astype(str)) - set(self._artifact.classes))
        if unseen:
            raise LabelMismatch(
                f"Test labels {unseen} were not seen during training (known: {list(self._artifact.classes)}).",
            )

    def fit(self) -> Self:
        if self._view.n_rows == 0:
            raise ValueError("Cannot evaluate on an empty table.")
        self.check_labels()

        classes = list(self._artifact.classes)
        y_true = self._view.labels.astype(str).to_numpy()
        predictions = self._artifact.predict(self._view.df)
        y_pred = predictions.astype(str).to_numpy()

        counts = confusion_matrix(y_true, y_pred, labels=classes)
        cm = pd.DataFrame(
            counts,
            index=pd.Index(classes, name="reference"),
            columns=pd.Index(classes, name="prediction"),
        )

        n_obs = len(y_true)
        n_correct = int(np.trace(counts))
        ci = stats.binomtest(n_correct, n_obs).proportion_ci(confidence_level=self.confidence_level, method="exact")

        precision, recall, f1, support = precision_recall_fscore_support(
            y_true,
            y_pred,
            labels=classes,
            zero_division=0,
        )
        per_class = pd.DataFrame(
            {"precision": precision, "recall": recall, "f1": f1, "support": support},
            index=pd.Index(classes, name=self._view.label_col),
        )

        accuracy = float(accuracy_score(y_true, y_pred))
        kappa = float(cohen_kappa_score(y_true, y_pred, labels=classes)) if len(set(y_true) | set(y_pred)) > 1 else 1.0
        logger.info(
            "%s: accuracy %.4f (%d/%d), kappa %.4f on held-out data",
            self._artifact.method,
            accuracy,
            n_correct,
            n_obs,
            kappa,
        )

        self._result = EvaluationResult(
            method=self._artifact.method,
            predictions=predictions,
            confusion_matrix=cm,
            accuracy=accuracy,
            kappa=kappa,
            accuracy_ci=(float(ci.low), float(ci.high)),
            confidence_level=self.confidence_level,
            no_information_rate=float(pd.Series(y_true).value_counts(normalize=True).max()),
            per_class=per_class,
        )
        return self

    def result(self) -> EvaluationResult:
        if self._result is None:
            raise ValueError("Must call fit() before result()")
        return self._result


def predict_cases(artifact: ModelArtifact, df: pd.DataFrame, *, id_col: str = "problem_id") -> pd.DataFrame:
    """Predict labels for unlabeled cases.

    Args:
        artifact: Fitted model.
        df: Table with at least the artifact's predictors (extra columns are ignored).
        id_col: Case identifier column; the row index is used when absent.

    Returns:
        DataFrame with columns ``id_col`` and ``prediction``.
    """
    ids = df[id_col].to_numpy() if id_col in df.columns else df.index.to_numpy()
    predicted = artifact.predict(df)
    logger.info("Predicted %d unlabeled cases with %s", len(df), artifact.method)
    return pd.DataFrame({id_col: ids, "prediction": predicted.astype(str).to_numpy()})
