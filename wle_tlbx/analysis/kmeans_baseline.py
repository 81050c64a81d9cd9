"""Unsupervised k-means baseline compared against the true labels."""

import logging
from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd
from sklearn.cluster import KMeans

from wle_tlbx.data.views import DatasetView

from .base_analyser import BaseAnalyser


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusteringResult:
    """Cluster assignments and their agreement with the labels.

    Attributes:
        assignments: Cluster index per row (``0 .. n_clusters-1``), aligned with ``index``.
        index: Row index of the clustered table.
        labels: True label per row, or ``None`` for unlabeled views.
        contingency: Cluster x label counts (``None`` without labels).
        centroids: Cluster centres in the (possibly standardized) feature space.
        inertia: Within-cluster sum of squared distances.
        n_iter: Iterations of the best run until assignment stability or the cap.
    """

    assignments: np.ndarray
    index: pd.Index
    labels: pd.Series | None
    contingency: pd.DataFrame | None
    centroids: pd.DataFrame
    inertia: float
    n_iter: int

    @property
    def n_clusters(self) -> int:
        return len(self.centroids)

    @property
    def cluster_sizes(self) -> pd.Series:
        return pd.Series(self.assignments).value_counts().reindex(range(self.n_clusters), fill_value=0)

    def assignment_frame(self) -> pd.DataFrame:
        """Long table with one row per observation: ``cluster`` and (if known) ``label``."""
        frame = pd.DataFrame({"cluster": self.assignments}, index=self.index)
        if self.labels is not None:
            frame["label"] = self.labels.to_numpy()
        return frame

    def plot_cluster_composition(self, **kwargs: object):
        """Bar chart of cluster sizes broken down by true label."""
        from wle_tlbx.plotting.clustering_plots import plot_cluster_composition  # noqa: PLC0415

        return plot_cluster_composition(self, **kwargs)

    def plot_label_composition(self, **kwargs: object):
        """Bar chart of label counts broken down by assigned cluster."""
        from wle_tlbx.plotting.clustering_plots import plot_label_composition  # noqa: PLC0415

        return plot_label_composition(self, **kwargs)


class KMeansBaseline(BaseAnalyser):
    """Partition rows into ``n_clusters`` groups with [:class:`sklearn.cluster.KMeans`](https://scikit-learn.org/stable/modules/generated/sklearn.cluster.KMeans.html).

    Lloyd iterations relocate centroids until the assignment is stable or
    ``max_iter`` is reached. Centroid initialisation is random (k-means++), so
    ``random_state`` pins the result. Diagnostic only: the assignments are not
    fed into the supervised models.
    """

    def __init__(
        self,
        view: DatasetView,
        n_clusters: int = 5,
        *,
        random_state: int | None = None,
        max_iter: int = 300,
        n_init: int = 10,
    ) -> None:
        if n_clusters < 1:
            raise ValueError(f"n_clusters must be positive, got {n_clusters}.")
        self._view = view
        self.n_clusters = n_clusters
        self.random_state = random_state
        self.max_iter = max_iter
        self.n_init = n_init
        self._result: ClusteringResult | None = None

    def fit(self) -> Self:
        features = self._view.features
        if features.empty or features.shape[1] == 0:
            raise ValueError("KMeansBaseline requires at least one numeric feature column.")
        if features.isna().any().any():
            raise ValueError("KMeansBaseline received missing values; filter predictors first.")
        if len(features) < self.n_clusters:
            raise ValueError(f"Cannot form {self.n_clusters} clusters from {len(features)} rows.")

        km = KMeans(
            n_clusters=self.n_clusters,
            max_iter=self.max_iter,
            n_init=self.n_init,
            random_state=self.random_state,
        )
        assignments = km.fit_predict(features.to_numpy(dtype=float))

        labels = self._view.labels if self._view.has_labels else None
        contingency = None
        if labels is not None:
            contingency = pd.crosstab(
                pd.Series(assignments, index=features.index, name="cluster"),
                labels.rename("label"),
                dropna=False,
            )

        logger.info(
            "k-means: %d clusters over %d rows x %d features, inertia=%.4g after %d iterations",
            self.n_clusters,
            len(features),
            features.shape[1],
            km.inertia_,
            km.n_iter_,
        )

        self._result = ClusteringResult(
            assignments=assignments,
            index=features.index,
            labels=labels,
            contingency=contingency,
            centroids=pd.DataFrame(km.cluster_centers_, columns=features.columns),
            inertia=float(km.inertia_),
            n_iter=int(km.n_iter_),
        )
        return self

    def result(self) -> ClusteringResult:
        if self._result is None:
            raise ValueError("Must call fit() before result()")
        return self._result
