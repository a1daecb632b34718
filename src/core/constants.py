"""Core constants used across FilterBench modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

CONTAINER_EXTENSION = ".h5"
REPORT_FILE_NAME = "hdf5_filter_results.csv"
REPORT_COLUMNS = (
    "filter",
    "file_bytes",
    "ratio_compressed_over_baseline",
    "reduction_pct",
    "compress_ms",
    "decompress_ms",
)
BASELINE_FILTER_NAME = "baseline_none"
DEFAULT_CHUNK_ELEMENT_LIMIT = 1024 * 1024
DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
TARGET_DATASET_NAMES = ("Raw", "Signal")
RECORD_GROUP_PATTERN = r"read_[^/]+"
GZIP_LEVELS = (1, 6, 9)
VBZ_FILTER_ID = 32020
VBZ_LEVELS = (1, 11, 22)
ZSTD_LEVELS = (1, 11, 22)
SZIP_NN_OPTION_MASK = 32
SZIP_EC_OPTION_MASK = 4
SZIP_PIXELS_PER_BLOCK = 16
FILTER_CATALOG_VERSION = 1
EXIT_OK = 0
EXIT_USAGE = 1
EXIT_OPEN_FAILURE = 2
EXIT_CONFIG_FAILURE = 3
EXIT_BASELINE_FAILURE = 4
