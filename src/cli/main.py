"""FilterBench CLI entry point.

This module parses benchmark arguments, maps them onto the SDK client,
and translates fatal errors into distinct process exit codes.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from bench.report_writer import render_results_table
from core.config import FilterBenchConfig, parse_chunk_element_limit
from core.constants import (
    EXIT_BASELINE_FAILURE,
    EXIT_CONFIG_FAILURE,
    EXIT_OK,
    EXIT_OPEN_FAILURE,
    EXIT_USAGE,
)
from core.errors import BaselineFailureError, ContainerOpenError, FilterBenchConfigError
from core.logging_config import get_logger
from filterbench import FilterBenchClient

_LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="filterbench",
        description="Benchmark HDF5 compression filters on one container",
    )
    parser.add_argument("source", help="Source HDF5 container")
    parser.add_argument("output_dir", help="Directory for output containers and the CSV report")
    parser.add_argument(
        "--filter",
        dest="filters",
        action="append",
        metavar="NAME",
        help="Run only this filter next to the baseline (repeatable)",
    )
    parser.add_argument("--filter-catalog", help="YAML file with extra filter specs")
    parser.add_argument(
        "--chunk-element-limit",
        help="Override FILTERBENCH_CHUNK_ELEMENT_LIMIT for this command",
    )
    parser.add_argument(
        "--no-readback",
        action="store_true",
        help="Skip timing the read-back of target datasets",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the FilterBench CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exit_signal:
        return EXIT_OK if exit_signal.code in (0, None) else EXIT_USAGE
    try:
        client = FilterBenchClient(_build_config(args))
        report = client.benchmark(args.source, args.output_dir, args.filters)
    except ContainerOpenError as error:
        _LOGGER.error("source_open_failed", source=args.source, error=str(error))
        return EXIT_OPEN_FAILURE
    except BaselineFailureError as error:
        _LOGGER.error("baseline_failed", source=args.source, error=str(error))
        return EXIT_BASELINE_FAILURE
    except FilterBenchConfigError as error:
        _LOGGER.error("configuration_invalid", error=str(error))
        return EXIT_CONFIG_FAILURE
    print(render_results_table(report.results))
    print(f"report_path={report.report_path}")
    return EXIT_OK


def _build_config(args: argparse.Namespace) -> FilterBenchConfig:
    """Build config from environment with CLI overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Effective runtime configuration.
    """
    config = FilterBenchConfig.from_env()
    if args.filter_catalog:
        config = replace(
            config, filter_catalog_path=Path(args.filter_catalog).expanduser().resolve()
        )
    if args.chunk_element_limit is not None:
        config = replace(
            config, chunk_element_limit=parse_chunk_element_limit(args.chunk_element_limit)
        )
    if args.no_readback:
        config = replace(config, measure_readback=False)
    return config
