"""Public SDK surface for FilterBench.

This module provides a stable import path for benchmark users.
It exposes the primary client and typed result models.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from bench.orchestrator import BenchmarkRunner
from bench.report_writer import write_results_csv
from core.config import FilterBenchConfig
from core.logging_config import configure_logging
from core.types import BenchmarkReport, BenchmarkResult, FilterSpec, FilterStage
from filters.builtin_filters import build_default_registry
from filters.registry import FilterRegistry


class FilterBenchClient:
    """Primary SDK entry point for compression benchmarks."""

    def __init__(self, config: FilterBenchConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or FilterBenchConfig.from_env()
        configure_logging(self._config.log_level)

    def registry(self, filter_names: Iterable[str] | None = None) -> FilterRegistry:
        """Build the filter registry, optionally narrowed to some names.

        Args:
            filter_names: Optional filter names to keep next to the baseline.

        Returns:
            Registry for one benchmark.
        """
        registry = build_default_registry(self._config)
        if filter_names:
            return registry.select(filter_names)
        return registry

    def benchmark(
        self,
        source_path: str | Path,
        output_dir: str | Path,
        filter_names: Iterable[str] | None = None,
    ) -> BenchmarkReport:
        """Benchmark filter specs against one source container.

        Args:
            source_path: Source HDF5 container.
            output_dir: Directory for output containers and the CSV report.
            filter_names: Optional subset of filter names to run.

        Returns:
            Ordered results and the report path.

        Raises:
            ContainerOpenError: If the source cannot be opened.
            BaselineFailureError: If the baseline run fails.
            FilterBenchConfigError: If the filter catalog or names are invalid.
        """
        output_root = Path(output_dir).expanduser().resolve()
        output_root.mkdir(parents=True, exist_ok=True)
        runner = BenchmarkRunner(self.registry(filter_names), self._config)
        results = runner.run(Path(source_path).expanduser(), output_root)
        report_path = write_results_csv(results, output_root)
        return BenchmarkReport(results=results, report_path=report_path)


__all__ = [
    "BenchmarkReport",
    "BenchmarkResult",
    "BenchmarkRunner",
    "FilterBenchClient",
    "FilterBenchConfig",
    "FilterRegistry",
    "FilterSpec",
    "FilterStage",
]
