"""End-to-end run: load, split, filter, cluster, train, evaluate and predict.

Run from the shell::

    wle-report --training-csv _data/pml-training.csv --testing-csv _data/pml-testing.csv --output-dir report

or from Python::

    >>> from wle_tlbx.config import PipelineConfig
    >>> from wle_tlbx.pipeline import run_pipeline
    >>> report = run_pipeline(PipelineConfig())
    >>> print(report.render())
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.figure import Figure

from wle_tlbx.analysis.cv_trainer import ModelArtifact
from wle_tlbx.analysis.evaluator import EvaluationResult, predict_cases
from wle_tlbx.analysis.kmeans_baseline import ClusteringResult
from wle_tlbx.analysis.model_registry import ModelRegistry
from wle_tlbx.analysis.predictor_filter import PredictorFilterResult
from wle_tlbx.config import DEFAULT_PIPELINE_CFG, PipelineConfig
from wle_tlbx.data.partition import PartitionResult
from wle_tlbx.data.wle_dataset import WeightLiftingDataset
from wle_tlbx.utils.paths import get_dataset_path
from wle_tlbx.utils.plotting_config import DEFAULT_PLOT_CFG, PlottingConfig


logger = logging.getLogger(__name__)

REPORT_FILENAME = "report.txt"


@dataclass(frozen=True)
class PipelineReport:
    """Everything a pipeline run produced.

    Attributes:
        config: Configuration of the run.
        partition: Train/test split of the labelled table.
        predictor_filter: Column selection fitted on the training subset.
        clustering: k-means baseline on the filtered training subset.
        artifacts: Fitted model per method.
        evaluations: Held-out evaluation per method.
        comparison: Cross-validated vs held-out accuracy per method.
        best_method: Method with the highest held-out accuracy.
        case_predictions: Predicted labels of the unlabeled cases, if any were given.
    """

    config: PipelineConfig
    partition: PartitionResult
    predictor_filter: PredictorFilterResult
    clustering: ClusteringResult
    artifacts: Mapping[str, ModelArtifact]
    evaluations: Mapping[str, EvaluationResult]
    comparison: pd.DataFrame
    best_method: str
    case_predictions: pd.DataFrame | None = None

    def render(self) -> str:
        """Plain-text report of all stages."""
        pf = self.predictor_filter
        sections = [
            "Weight Lifting Exercises: classification report",
            "",
            f"Partition (seed {self.partition.seed}, train fraction {self.partition.train_fraction}): "
            f"{len(self.partition.train)} train / {len(self.partition.test)} test rows",
            self.partition.summary().to_string(float_format=lambda v: f"{v:.3f}"),
            "",
            f"Predictor filter (cutoff {pf.cutoff}): {len(pf.predictors)} predictors retained",
            pf.summary()[["n_dropped"]].to_string(),
            "",
            f"k-means baseline ({self.clustering.n_clusters} clusters, inertia {self.clustering.inertia:.4g})",
        ]
        if self.clustering.contingency is not None:
            sections.append(self.clustering.contingency.to_string())

        for method, artifact in self.artifacts.items():
            folds = ", ".join(f"{score:.4f}" for score in artifact.fold_scores)
            sections += [
                "",
                f"== {method} ==",
                f"Selected hyperparameters: {dict(artifact.best_params)}",
                f"{artifact.cv_config.n_folds}-fold CV accuracy: {artifact.mean_cv_score:.4f} ({folds})",
                "",
            ]
            if method in self.evaluations:
                sections.append(self.evaluations[method].summary())

        sections += [
            "",
            "Model comparison",
            self.comparison.drop(columns=["best_params"], errors="ignore").to_string(
                float_format=lambda v: f"{v:.4f}",
            ),
            f"Best model: {self.best_method}",
        ]
        if self.case_predictions is not None:
            sections += ["", f"Case predictions ({self.best_method})", self.case_predictions.to_string(index=False)]
        return "\n".join(sections) + "\n"

    def figures(self, plot_cfg: PlottingConfig = DEFAULT_PLOT_CFG) -> dict[str, Figure]:
        """Diagnostic figures keyed by file stem."""
        from wle_tlbx.plotting.evaluation_plots import plot_model_comparison  # noqa: PLC0415

        with plot_cfg.apply():
            figs: dict[str, Figure] = {
                "class_distribution": self.partition.plot_class_distribution(),
                "correlation_heatmap": self.predictor_filter.plot_heatmap(),
            }
            if self.clustering.labels is not None:
                figs["cluster_composition"] = self.clustering.plot_cluster_composition(plot_cfg=plot_cfg)
                figs["label_composition"] = self.clustering.plot_label_composition(plot_cfg=plot_cfg)
            for method, evaluation in self.evaluations.items():
                figs[f"confusion_matrix_{method}"] = evaluation.plot_confusion_matrix()
            figs["model_comparison"] = plot_model_comparison(self.comparison)
        return figs

    def save(self, output_dir: str | Path, *, plot_cfg: PlottingConfig = DEFAULT_PLOT_CFG) -> list[Path]:
        """Write ``report.txt`` and one PNG per figure into ``output_dir``.

        Returns:
            Paths of all written files, report first.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        report_path = output_dir / REPORT_FILENAME
        report_path.write_text(self.render(), encoding="utf-8")
        written = [report_path]

        for name, fig in self.figures(plot_cfg).items():
            fig_path = output_dir / f"{name}.png"
            fig.savefig(fig_path)
            plt.close(fig)
            written.append(fig_path)

        logger.info("Wrote report and %d figures to %s", len(written) - 1, output_dir)
        return written


def _load_cases(config: PipelineConfig, *, use_default: bool) -> WeightLiftingDataset | None:
    """Unlabeled cases from ``config.testing_csv`` (or the default file, if present)."""
    path = config.testing_csv
    if path is None and use_default:
        try:
            path = get_dataset_path("pml_testing")
        except FileNotFoundError:
            logger.info("No unlabeled case file found; skipping case prediction.")
            return None
    if path is None:
        return None
    return WeightLiftingDataset.from_csv(path, require_label=False)


def run_pipeline(
    config: PipelineConfig = DEFAULT_PIPELINE_CFG,
    *,
    dataset: WeightLiftingDataset | None = None,
    cases: WeightLiftingDataset | None = None,
) -> PipelineReport:
    """Execute all stages in order and collect their results.

    Args:
        config: Run parameters.
        dataset: Labelled table; loaded from ``config.training_csv`` when omitted.
        cases: Unlabeled cases; loaded from ``config.testing_csv`` (or the
            default ``pml-testing.csv`` when ``dataset`` is also loaded from
            defaults) when omitted.

    Raises:
        WLEPipelineError: Any stage failure (malformed input, empty predictor
            set, too few rows per fold, label mismatch).
    """
    if cases is None:
        cases = _load_cases(config, use_default=dataset is None and config.training_csv is None)
    if dataset is None:
        dataset = WeightLiftingDataset.from_csv(config.training_csv)

    partition = dataset.split(train_fraction=config.train_fraction, seed=config.seed)
    train = dataset.with_df(partition.train)
    test = dataset.with_df(partition.test)

    predictor_filter = (
        train.make_predictor_filter(cutoff=config.cutoff, exclude=config.identifier_columns).fit().result()
    )
    train = train.with_df(predictor_filter.df)
    test = test.with_df(predictor_filter.transform(test.df))

    clustering = (
        train.make_kmeans_baseline(
            n_clusters=config.n_clusters,
            columns=predictor_filter.predictors,
            random_state=config.seed,
            max_iter=config.kmeans_max_iter,
        )
        .fit()
        .result()
    )

    registry = ModelRegistry(
        n_folds=config.n_folds,
        random_state=config.seed,
        rf_n_estimators=config.rf_n_estimators,
        n_jobs=config.n_jobs,
    )
    train_view, test_view = train.view(), test.view()
    for method in config.methods:
        registry.fit(train_view, method=method, param_grid=config.param_grid(method))
        registry.evaluate_on(method, test_view)

    best = registry.best()
    logger.info("Best model: %s (held-out accuracy %.4f)", best.name, best.evaluation.accuracy)

    case_predictions = predict_cases(best.artifact, cases.df) if cases is not None else None

    report = PipelineReport(
        config=config,
        partition=partition,
        predictor_filter=predictor_filter,
        clustering=clustering,
        artifacts={entry.name: entry.artifact for entry in registry},
        evaluations={entry.name: entry.evaluation for entry in registry if entry.evaluation is not None},
        comparison=registry.compare(),
        best_method=best.name,
        case_predictions=case_predictions,
    )
    if config.output_dir is not None:
        report.save(config.output_dir)
    return report


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="wle-report",
        description="Train and evaluate exercise-quality classifiers on the Weight Lifting Exercises data.",
    )
    p.add_argument(
        "--training-csv",
        type=Path,
        default=None,
        help="Labelled CSV. Defaults to pml-training.csv in $WLE_DATA_DIR or <repo>/_data.",
    )
    p.add_argument(
        "--testing-csv",
        type=Path,
        default=None,
        help="Unlabeled cases to predict. Defaults to pml-testing.csv next to the training file, if present.",
    )
    p.add_argument(
        "--output-dir",
        type=Path,
        default=Path("wle_report"),
        help="Directory for report.txt and the figures (default: ./wle_report).",
    )
    return p


def main(argv: Sequence[str] | None = None) -> int:
    """Console entry point; returns the process exit status."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    args = _build_arg_parser().parse_args(argv)

    testing_csv = args.testing_csv
    if testing_csv is None and args.training_csv is not None:
        sibling = args.training_csv.with_name("pml-testing.csv")
        testing_csv = sibling if sibling.exists() else None

    config = replace(
        DEFAULT_PIPELINE_CFG,
        training_csv=args.training_csv,
        testing_csv=testing_csv,
        output_dir=args.output_dir,
    )
    try:
        report = run_pipeline(config)
    except (ValueError, FileNotFoundError) as exc:
        logger.error("Pipeline failed: %s", exc)
        return 1

    print(report.render())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
