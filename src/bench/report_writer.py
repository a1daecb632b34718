"""CSV report rendering for benchmark results.

File sizes are reported in bytes; times are in milliseconds.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Sequence

from core.constants import REPORT_COLUMNS, REPORT_FILE_NAME
from core.types import BenchmarkResult


def result_row(result: BenchmarkResult) -> tuple[str, ...]:
    """Format one result as report cells in column order."""
    return (
        result.filter_name,
        str(result.output_byte_size),
        f"{result.ratio_vs_baseline:.6f}",
        f"{result.reduction_percent:.3f}",
        f"{result.cumulative_transcode_millis:.3f}",
        f"{result.readback_millis:.3f}",
    )


def write_results_csv(results: Sequence[BenchmarkResult], output_dir: Path) -> Path:
    """Write the benchmark report next to the output containers.

    Args:
        results: Ordered results, baseline first.
        output_dir: Existing output directory.

    Returns:
        Path of the written CSV report.
    """
    report_path = output_dir / REPORT_FILE_NAME
    with report_path.open("w", encoding="utf-8", newline="") as report_file:
        writer = csv.writer(report_file)
        writer.writerow(REPORT_COLUMNS)
        for result in results:
            writer.writerow(result_row(result))
    return report_path


def render_results_table(results: Sequence[BenchmarkResult]) -> str:
    """Render results as tab-separated lines for terminal output."""
    lines = ["\t".join(REPORT_COLUMNS)]
    lines.extend("\t".join(result_row(result)) for result in results)
    return "\n".join(lines)
