"""Shared typed models.

This module defines immutable data models used by the filter registry,
transcoding engine, and benchmark layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from h5py import h5z

from core.errors import FilterBenchConfigError

PRE_COMPRESSION_FILTER_IDS = frozenset({h5z.FILTER_SHUFFLE})
POST_COMPRESSION_FILTER_IDS = frozenset({h5z.FILTER_FLETCHER32})


@dataclass(frozen=True)
class FilterStage:
    """One step of an HDF5 filter pipeline.

    Attributes:
        filter_id: Registered HDF5 filter identifier.
        options: Filter client data values.
        label: Human-readable stage name for logs.
    """

    filter_id: int
    options: tuple[int, ...] = ()
    label: str = ""

    @property
    def is_compressor(self) -> bool:
        """Return whether this stage encodes data rather than reordering it."""
        return (
            self.filter_id not in PRE_COMPRESSION_FILTER_IDS
            and self.filter_id not in POST_COMPRESSION_FILTER_IDS
        )


@dataclass(frozen=True)
class StoragePolicy:
    """Per-dataset write configuration.

    Attributes:
        chunk_shape: Chunk extents, or None for contiguous layout.
        stages: Ordered filter pipeline.
    """

    chunk_shape: tuple[int, ...] | None = None
    stages: tuple[FilterStage, ...] = ()

    @classmethod
    def default(cls) -> "StoragePolicy":
        """Return the contiguous, unfiltered policy."""
        return cls()

    @property
    def is_filtered(self) -> bool:
        return bool(self.stages)


@dataclass(frozen=True)
class FilterSpec:
    """Named storage strategy registered for benchmarking.

    Attributes:
        name: Unique registry key, also the output container stem.
        stages: Filter pipeline appended to each target dataset policy.
        requires_availability_check: Probe ``filter_id`` before use.
        filter_id: Backing HDF5 filter identifier, when one exists.
    """

    name: str
    stages: tuple[FilterStage, ...] = ()
    requires_availability_check: bool = False
    filter_id: int | None = None

    def __post_init__(self) -> None:
        _validate_filter_spec(self)

    @property
    def is_baseline(self) -> bool:
        """Return whether this spec never adds chunking or filters."""
        return not self.stages

    def configure(self, policy: StoragePolicy) -> StoragePolicy:
        """Return a new policy with this spec's stages appended.

        Args:
            policy: Policy carrying the dataset chunk shape.

        Returns:
            Policy with the combined filter pipeline.
        """
        return StoragePolicy(chunk_shape=policy.chunk_shape, stages=policy.stages + self.stages)


@dataclass(frozen=True)
class RawDataset:
    """Dataset payload read from a source container.

    Attributes:
        path: Absolute dataset path.
        data: In-memory array holding every element.
        element_type: Element dtype as stored in the source file.
        shape: Dataset extents.
    """

    path: str
    data: np.ndarray
    element_type: np.dtype
    shape: tuple[int, ...]

    @property
    def element_count(self) -> int:
        return int(np.prod(self.shape, dtype=np.int64))

    @property
    def byte_size(self) -> int:
        return self.element_count * self.element_type.itemsize


@dataclass
class WalkSummary:
    """Counters collected while mirroring one container.

    Attributes:
        filter_name: Spec used for the walk.
        group_count: Groups created in the destination.
        dataset_count: Datasets written to the destination.
        target_count: Datasets selected for transcoding.
        transcode_millis: Summed write time of target datasets.
        skipped_paths: Source paths that failed and were skipped.
    """

    filter_name: str
    group_count: int = 0
    dataset_count: int = 0
    target_count: int = 0
    transcode_millis: float = 0.0
    skipped_paths: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BenchmarkResult:
    """Comparable outcome of one filter spec run.

    Attributes:
        filter_name: Filter spec name.
        output_byte_size: Size of the closed output container in bytes.
        ratio_vs_baseline: Output size divided by baseline size.
        reduction_percent: ``100 * (1 - ratio_vs_baseline)``.
        cumulative_transcode_millis: Summed target dataset write time.
        readback_millis: Time to read target datasets back, 0.0 when skipped.
    """

    filter_name: str
    output_byte_size: int
    ratio_vs_baseline: float
    reduction_percent: float
    cumulative_transcode_millis: float
    readback_millis: float = 0.0


@dataclass(frozen=True)
class BenchmarkReport:
    """Benchmark results together with the written report path."""

    results: tuple[BenchmarkResult, ...]
    report_path: Path


def _validate_filter_spec(spec: FilterSpec) -> None:
    if not spec.name or spec.name != spec.name.strip() or "/" in spec.name:
        raise FilterBenchConfigError(
            f"Invalid filter spec name '{spec.name}'. "
            "Use a non-empty name without surrounding spaces or slashes."
        )
    if spec.requires_availability_check and spec.filter_id is None:
        raise FilterBenchConfigError(
            f"Filter spec '{spec.name}' requires an availability check but has no filter_id."
        )
    compressor_positions = [
        index for index, stage in enumerate(spec.stages) if stage.is_compressor
    ]
    if len(compressor_positions) > 1:
        raise FilterBenchConfigError(
            f"Filter spec '{spec.name}' declares {len(compressor_positions)} compressor stages. "
            "Use at most one compressor per pipeline."
        )
    if not compressor_positions:
        return
    compressor_index = compressor_positions[0]
    for index, stage in enumerate(spec.stages):
        if stage.filter_id in PRE_COMPRESSION_FILTER_IDS and index > compressor_index:
            raise FilterBenchConfigError(
                f"Filter spec '{spec.name}' places shuffle after its compressor."
            )
        if stage.filter_id in POST_COMPRESSION_FILTER_IDS and index < compressor_index:
            raise FilterBenchConfigError(
                f"Filter spec '{spec.name}' places fletcher32 before its compressor."
            )
