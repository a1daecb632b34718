"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import h5py
import numpy as np
import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def source_container(tmp_path: Path) -> Path:
    """Build a small nanopore-style container with two read records."""
    source_path = tmp_path / "source.h5"
    with h5py.File(source_path, "w") as container:
        container.attrs["file_version"] = "2.0"
        for index in range(2):
            read_group = container.create_group(f"read_000{index + 1}")
            read_group.attrs.create("read_number", index + 1, dtype="int32")
            signal = np.tile(np.arange(0, 400, dtype=np.int16), 50)
            read_group.create_dataset("Raw", data=signal)
            read_group["Raw"].attrs["units"] = "pA"
            read_group.create_dataset("Other", data=np.arange(4, dtype=np.int32))
        analyses = container.create_group("Analyses/Basecall_000")
        analyses.create_dataset("Signal", data=np.zeros(64, dtype=np.float32))
        analyses.create_dataset("scalar", data=np.float64(3.5))
    return source_path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Return an existing output directory."""
    directory = tmp_path / "out"
    directory.mkdir()
    return directory
