"""Utility path resolution tests."""

from pathlib import Path

import pytest

from wle_tlbx.utils.paths import DATA_DIR_ENV, get_data_dir, get_dataset_path


def test_data_dir_defaults_to_repo_data(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without the environment override the data directory is ``<repo>/_data``."""
    monkeypatch.delenv(DATA_DIR_ENV, raising=False)
    assert get_data_dir() == (Path(__file__).resolve().parents[1] / "_data").resolve()


def test_get_dataset_path_uses_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Known dataset keys resolve to their file names inside ``$WLE_DATA_DIR``."""
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path))
    (tmp_path / "pml-training.csv").write_text("classe\nA\n")

    path = get_dataset_path("pml_training")

    assert path.exists()
    assert path.parent == get_data_dir()
    assert path.name == "pml-training.csv"


def test_get_dataset_path_missing_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path))
    with pytest.raises(FileNotFoundError, match="pml_testing"):
        get_dataset_path("pml_testing")
