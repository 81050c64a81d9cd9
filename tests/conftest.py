"""Test configuration for the WLE toolbox."""

from pathlib import Path
import sys

import matplotlib
import numpy as np
import pandas as pd
import pytest


matplotlib.use("Agg")

# Ensure the local package is importable when the repo isn't installed.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


CATEGORIES = ["A", "B", "C", "D", "E"]

# Class means of the informative sensor columns; pairwise uncorrelated across classes.
CLASS_MEANS = {
    "roll_belt": [0.0, 4.0, 0.0, 4.0, 2.0],
    "pitch_belt": [0.0, 0.0, 4.0, 4.0, 2.0],
    "yaw_belt": [4.0, 0.0, 0.0, 4.0, 2.0],
    "accel_arm_x": [2.0, 2.0, 2.0, 2.0, 6.0],
}

SMALL_GRIDS = {
    "gradient_boosting": {"n_estimators": [10], "max_depth": [1], "learning_rate": [0.1]},
    "random_forest": {"max_features": [2]},
}


def make_wle_frame(n_per_class: int = 40, seed: int = 0) -> pd.DataFrame:
    """Synthetic table with the column kinds of the WLE training file.

    - six identifier/metadata columns plus ``num_window``
    - four class-dependent sensor columns and one noise column
    - ``total_accel_belt``, almost a copy of ``roll_belt`` (|r| > 0.99)
    - ``kurtosis_roll_belt``, mostly missing
    - ``skewness_yaw_belt``, textual spreadsheet leftovers
    - ``classe`` with balanced categories A-E
    """
    rng = np.random.default_rng(seed)
    n = n_per_class * len(CATEGORIES)
    class_idx = np.repeat(np.arange(len(CATEGORIES)), n_per_class)

    frame = pd.DataFrame(
        {
            "X": np.arange(1, n + 1),
            "user_name": rng.choice(["adelmo", "carlitos", "charles", "eurico", "jeremy", "pedro"], size=n),
            "raw_timestamp_part_1": 1_322_489_729 + np.arange(n),
            "raw_timestamp_part_2": rng.integers(0, 1_000_000, size=n),
            "cvtd_timestamp": "05/12/2011 11:23",
            "new_window": np.where(np.arange(n) % 25 == 0, "yes", "no"),
            "num_window": rng.integers(1, 800, size=n),
        },
    )
    for col, means in CLASS_MEANS.items():
        frame[col] = np.asarray(means)[class_idx] + rng.normal(0.0, 1.0, size=n)
    frame["gyros_dumbbell_y"] = rng.normal(0.0, 1.0, size=n)
    frame["total_accel_belt"] = 2.0 * frame["roll_belt"] + rng.normal(0.0, 0.05, size=n)

    kurtosis = np.full(n, np.nan)
    kurtosis[::25] = rng.normal(size=len(kurtosis[::25]))
    frame["kurtosis_roll_belt"] = kurtosis
    frame["skewness_yaw_belt"] = np.where(np.arange(n) % 25 == 0, "#DIV/0!", "")

    frame["classe"] = pd.Categorical(np.asarray(CATEGORIES)[class_idx], categories=CATEGORIES)
    # Shuffle rows so that the labels are not sorted.
    return frame.sample(frac=1.0, random_state=seed).reset_index(drop=True)


def make_cases_frame(n: int = 20, seed: int = 1) -> pd.DataFrame:
    """Unlabeled cases in the layout of the WLE testing file (``problem_id`` instead of ``classe``)."""
    frame = make_wle_frame(n_per_class=n // len(CATEGORIES), seed=seed).drop(columns="classe")
    return frame.assign(problem_id=np.arange(1, len(frame) + 1))


def write_wle_csv(frame: pd.DataFrame, path: Path) -> Path:
    """Write ``frame`` like the original export: unnamed row-number column first, no ``X`` header."""
    out = frame.drop(columns="X").set_axis(frame["X"].to_numpy(), axis=0)
    out.to_csv(path, index=True)
    return path


@pytest.fixture
def wle_frame() -> pd.DataFrame:
    """200 labelled rows, 40 per category."""
    return make_wle_frame()


@pytest.fixture
def wle_dataset(wle_frame: pd.DataFrame):
    """Dataset wrapping :func:`wle_frame`."""
    from wle_tlbx.data import WeightLiftingDataset

    return WeightLiftingDataset(df=wle_frame)


@pytest.fixture
def cases_frame() -> pd.DataFrame:
    return make_cases_frame()


@pytest.fixture
def wle_csv(tmp_path: Path, wle_frame: pd.DataFrame) -> Path:
    """Training CSV on disk."""
    return write_wle_csv(wle_frame, tmp_path / "pml-training.csv")


@pytest.fixture
def singleton_csv(tmp_path: Path, wle_frame: pd.DataFrame) -> Path:
    """Training CSV in which category E has a single row."""
    is_e = wle_frame["classe"] == "E"
    frame = pd.concat([wle_frame.loc[~is_e], wle_frame.loc[is_e].head(1)])
    return write_wle_csv(frame, tmp_path / "pml-training.csv")


@pytest.fixture
def cases_csv(tmp_path: Path, cases_frame: pd.DataFrame) -> Path:
    """Unlabeled CSV on disk, next to :func:`wle_csv`."""
    return write_wle_csv(cases_frame, tmp_path / "pml-testing.csv")


@pytest.fixture
def small_grids() -> dict[str, dict[str, list[object]]]:
    """Single-candidate grids that keep model fitting fast."""
    return {method: {key: list(values) for key, values in grid.items()} for method, grid in SMALL_GRIDS.items()}


@pytest.fixture
def filtered_split(wle_dataset) -> tuple:
    """Partition + predictor filter on the synthetic data: (train_view, test_view, filter_result)."""
    parts = wle_dataset.split(train_fraction=0.7, seed=300)
    train = wle_dataset.with_df(parts.train)
    filt = train.make_predictor_filter(cutoff=0.7).fit().result()
    train_view = train.with_df(filt.df).view()
    test_view = wle_dataset.with_df(filt.transform(parts.test)).view()
    return train_view, test_view, filt
