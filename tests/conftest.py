from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def make_file() -> Callable[..., Path]:
    """Create a sparse file of the given size and modification time."""

    def _make_file(path: Path, size: int = 0, modified_at: int = 1_000_000) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as file_out:
            file_out.truncate(size)

        os.utime(path, (modified_at, modified_at))
        return path

    return _make_file
