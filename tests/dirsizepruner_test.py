from __future__ import annotations

from pathlib import Path
from typing import Callable
from unittest.mock import patch

import pytest

from maxdirsize.dirsizepruner import DirectoryPruner


@pytest.fixture
def pruner() -> DirectoryPruner:
    return DirectoryPruner()


def test_prune_removes_zero_count_directories(
    pruner: DirectoryPruner,
    tmp_path: Path,
) -> None:
    (tmp_path / "empty").mkdir()

    result = pruner.prune({str(tmp_path / "empty"): 0})

    assert result == [str(tmp_path / "empty")]
    assert not (tmp_path / "empty").exists()


def test_prune_removes_negative_count_directories(
    pruner: DirectoryPruner,
    tmp_path: Path,
) -> None:
    (tmp_path / "overdrawn").mkdir()

    pruner.prune({str(tmp_path / "overdrawn"): -1})

    assert not (tmp_path / "overdrawn").exists()


def test_prune_keeps_directories_with_files(
    pruner: DirectoryPruner,
    tmp_path: Path,
    make_file: Callable[..., Path],
) -> None:
    make_file(tmp_path / "busy" / "file", 1)

    with patch("os.rmdir") as mock_rmdir:
        result = pruner.prune({str(tmp_path / "busy"): 1})

    assert result == []
    assert mock_rmdir.call_count == 0


def test_prune_nested_directories_deepest_first(
    pruner: DirectoryPruner,
    tmp_path: Path,
) -> None:
    (tmp_path / "a" / "b" / "c").mkdir(parents=True)
    (tmp_path / "z").mkdir()
    dir_file_count = {
        str(tmp_path / "a"): 0,
        str(tmp_path / "z"): 0,
        str(tmp_path / "a" / "b"): 0,
        str(tmp_path / "a" / "b" / "c"): 0,
    }

    result = pruner.prune(dir_file_count)

    assert result == [
        str(tmp_path / "a" / "b" / "c"),
        str(tmp_path / "a" / "b"),
        str(tmp_path / "a"),
        str(tmp_path / "z"),
    ]
    assert list(tmp_path.iterdir()) == []


def test_prune_failure_is_logged_and_skipped(
    pruner: DirectoryPruner,
    tmp_path: Path,
    make_file: Callable[..., Path],
    caplog: pytest.LogCaptureFixture,
) -> None:
    # An untracked file keeps the directory from being removed
    make_file(tmp_path / "untracked" / "stray", 1)
    (tmp_path / "empty").mkdir()

    result = pruner.prune({str(tmp_path / "untracked"): 0, str(tmp_path / "empty"): 0})

    assert result == [str(tmp_path / "empty")]
    assert (tmp_path / "untracked" / "stray").exists()
    assert "Error removing directory" in caplog.text


def test_prune_missing_directory_is_logged(
    pruner: DirectoryPruner,
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    result = pruner.prune({str(tmp_path / "gone"): 0})

    assert result == []
    assert str(tmp_path / "gone") in caplog.text


def test_prune_logs_removed_directories(
    pruner: DirectoryPruner,
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    (tmp_path / "old").mkdir()
    caplog.set_level("INFO")

    pruner.prune({str(tmp_path / "old"): 0})

    assert f"removed directory: {tmp_path / 'old'}" in caplog.text
