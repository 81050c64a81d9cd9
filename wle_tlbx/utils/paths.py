import os
from pathlib import Path
from typing import Literal


__all__ = ["DATA_DIR_ENV", "get_data_dir", "get_dataset_path"]


DATA_DIR_ENV = "WLE_DATA_DIR"

_DATASET_MAP: dict[str, str] = {
    "pml_training": "pml-training.csv",
    "pml_testing": "pml-testing.csv",
}


def get_data_dir() -> Path:
    """Get the path to the data directory.

    ``$WLE_DATA_DIR`` takes precedence over the ``_data`` directory at the
    repository root.
    """
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser().resolve()
    return (Path(__file__).parents[2] / "_data").resolve()


def get_dataset_path(filename: Literal["pml_training", "pml_testing"] | str) -> Path:  # noqa: PYI051
    """Get the full path to a dataset file in the data directory.

    Args:
        filename: Key to known dataset or custom filename

    Returns:
        Full path to the dataset file

    Raises:
        FileNotFoundError: If the file does not exist.

    Supported: pml-training.csv   pml-testing.csv
    """
    ds_path = get_data_dir() / _DATASET_MAP.get(filename, filename)
    if not ds_path.exists():
        raise FileNotFoundError(f"Dataset file '{filename}' not found at {ds_path}")
    return ds_path
