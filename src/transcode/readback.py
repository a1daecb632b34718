"""Read-back timing of target datasets in a finished output container."""

from __future__ import annotations

import time
from pathlib import Path

import h5py

from core.errors import ContainerOpenError, DatasetReadError
from core.logging_config import get_logger
from transcode.dataset_io import read_raw_dataset
from transcode.target_selection import TargetSelector

_LOGGER = get_logger(__name__)


def measure_readback_millis(container_path: Path, selector: TargetSelector) -> float:
    """Time a full read of every target dataset in one container.

    Args:
        container_path: Closed output container to reopen read-only.
        selector: Target dataset selector.

    Returns:
        Summed read milliseconds over all target datasets.

    Raises:
        ContainerOpenError: If the container cannot be reopened.
    """
    try:
        container = h5py.File(container_path, "r")
    except OSError as error:
        raise ContainerOpenError(
            f"Failed to reopen {container_path} for read-back timing: {error}."
        ) from error
    with container:
        target_paths = _collect_target_paths(container, selector)
        total_millis = 0.0
        for dataset_path in target_paths:
            started_at = time.perf_counter()
            try:
                read_raw_dataset(container, dataset_path)
            except DatasetReadError as error:
                _LOGGER.warning("readback_failed", path=dataset_path, error=str(error))
                continue
            total_millis += (time.perf_counter() - started_at) * 1000.0
    return total_millis


def _collect_target_paths(container: h5py.File, selector: TargetSelector) -> list[str]:
    target_paths: list[str] = []

    def _visit(name: str, node: object) -> None:
        if isinstance(node, h5py.Dataset) and selector.is_target(f"/{name}"):
            target_paths.append(f"/{name}")

    container.visititems(_visit)
    return target_paths
