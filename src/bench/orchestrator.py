"""Benchmark orchestration across registered filter specs.

This module coordinates the baseline run, availability skips, per-spec
destination containers, size measurement, and ratio computation.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import h5py

from core.config import FilterBenchConfig
from core.constants import CONTAINER_EXTENSION
from core.errors import (
    BaselineFailureError,
    ContainerOpenError,
    FilterUnavailableError,
)
from core.logging_config import get_logger
from core.types import BenchmarkResult, FilterSpec, WalkSummary
from filters.availability import (
    FilterAvailability,
    ensure_filter_available,
    is_filter_available,
)
from filters.registry import FilterRegistry
from transcode.graph_walker import mirror_container
from transcode.readback import measure_readback_millis
from transcode.target_selection import TargetSelector

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class SpecRunOutcome:
    """Raw measurements of one filter spec run before ratio computation."""

    spec: FilterSpec
    output_path: Path
    output_byte_size: int
    summary: WalkSummary
    readback_millis: float


class BenchmarkRunner:
    """Run the transcoding engine once per filter spec."""

    def __init__(
        self,
        registry: FilterRegistry,
        config: FilterBenchConfig,
        *,
        selector: TargetSelector | None = None,
        availability: FilterAvailability = is_filter_available,
    ) -> None:
        self._registry = registry
        self._config = config
        self._selector = selector or TargetSelector()
        self._availability = availability

    def run(self, source_path: Path | str, output_dir: Path | str) -> tuple[BenchmarkResult, ...]:
        """Benchmark every registered spec against one source container.

        Args:
            source_path: Existing source container.
            output_dir: Existing directory receiving one container per spec.

        Returns:
            Results with the baseline first, then registration order.

        Raises:
            ContainerOpenError: If the source container cannot be opened.
            BaselineFailureError: If the baseline run fails or is empty.
        """
        specs = self._registry.all()
        if not specs or not specs[0].is_baseline:
            raise BaselineFailureError(
                "The first registered filter must be an uncompressed baseline. "
                "Register the baseline spec before any compressor."
            )
        source_file = Path(source_path)
        output_root = Path(output_dir)
        source = _open_source(source_file)
        with source:
            _LOGGER.info(
                "benchmark_started",
                source=str(source_file),
                output_dir=str(output_root),
                filter_count=len(specs),
            )
            baseline = self._run_baseline(source, specs[0], output_root)
            results = [_build_result(baseline, baseline.output_byte_size)]
            for spec in specs[1:]:
                outcome = self._run_optional(source, spec, output_root)
                if outcome is None:
                    continue
                result = _build_result(outcome, baseline.output_byte_size)
                _log_result(result)
                results.append(result)
        _LOGGER.info("benchmark_completed", result_count=len(results))
        return tuple(results)

    def _run_baseline(
        self,
        source: h5py.File,
        spec: FilterSpec,
        output_root: Path,
    ) -> SpecRunOutcome:
        try:
            outcome = self._run_spec(source, spec, output_root)
        except ContainerOpenError as error:
            raise BaselineFailureError(
                f"Baseline run '{spec.name}' failed: {error}"
            ) from error
        if outcome.output_byte_size <= 0:
            raise BaselineFailureError(
                f"Baseline output {outcome.output_path} is empty. "
                "Check that the source container holds readable objects."
            )
        _LOGGER.info(
            "baseline_completed",
            filter_name=spec.name,
            file_bytes=outcome.output_byte_size,
        )
        return outcome

    def _run_optional(
        self,
        source: h5py.File,
        spec: FilterSpec,
        output_root: Path,
    ) -> SpecRunOutcome | None:
        try:
            ensure_filter_available(spec, self._availability)
        except FilterUnavailableError as error:
            _LOGGER.warning("filter_skipped_unavailable", filter_name=spec.name, reason=str(error))
            return None
        try:
            return self._run_spec(source, spec, output_root)
        except ContainerOpenError as error:
            _LOGGER.warning("filter_run_failed", filter_name=spec.name, error=str(error))
            return None

    def _run_spec(self, source: h5py.File, spec: FilterSpec, output_root: Path) -> SpecRunOutcome:
        output_path = output_root / f"{spec.name}{CONTAINER_EXTENSION}"
        destination = _create_destination(output_path)
        with destination:
            summary = mirror_container(
                source,
                destination,
                spec,
                self._selector,
                element_limit=self._config.chunk_element_limit,
                availability=self._availability,
            )
            destination.flush()
        output_byte_size = output_path.stat().st_size
        readback_millis = self._measure_readback(output_path)
        return SpecRunOutcome(
            spec=spec,
            output_path=output_path,
            output_byte_size=output_byte_size,
            summary=summary,
            readback_millis=readback_millis,
        )

    def _measure_readback(self, output_path: Path) -> float:
        if not self._config.measure_readback:
            return 0.0
        try:
            return measure_readback_millis(output_path, self._selector)
        except ContainerOpenError as error:
            _LOGGER.warning("readback_skipped", path=str(output_path), error=str(error))
            return 0.0


def _open_source(source_path: Path) -> h5py.File:
    """Open the source container read-only."""
    try:
        return h5py.File(source_path, "r")
    except (OSError, ValueError) as error:
        raise ContainerOpenError(
            f"Failed to open source container {source_path}: {error}. "
            "Check the path points to a readable HDF5 file."
        ) from error


def _create_destination(output_path: Path) -> h5py.File:
    """Create a fresh destination container, replacing any stale file."""
    try:
        output_path.unlink(missing_ok=True)
        return h5py.File(output_path, "w")
    except (OSError, ValueError) as error:
        raise ContainerOpenError(
            f"Failed to create output container {output_path}: {error}."
        ) from error


def _build_result(outcome: SpecRunOutcome, baseline_byte_size: int) -> BenchmarkResult:
    ratio = outcome.output_byte_size / baseline_byte_size
    return BenchmarkResult(
        filter_name=outcome.spec.name,
        output_byte_size=outcome.output_byte_size,
        ratio_vs_baseline=ratio,
        reduction_percent=100.0 * (1.0 - ratio),
        cumulative_transcode_millis=outcome.summary.transcode_millis,
        readback_millis=outcome.readback_millis,
    )


def _log_result(result: BenchmarkResult) -> None:
    _LOGGER.info(
        "filter_run_completed",
        filter_name=result.filter_name,
        file_bytes=result.output_byte_size,
        ratio=round(result.ratio_vs_baseline, 6),
        reduction_pct=round(result.reduction_percent, 3),
        compress_ms=round(result.cumulative_transcode_millis, 3),
        decompress_ms=round(result.readback_millis, 3),
    )
