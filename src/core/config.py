"""Runtime configuration model for FilterBench.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_CHUNK_ELEMENT_LIMIT,
    DEFAULT_LOG_LEVEL,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import FilterBenchConfigError

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class FilterBenchConfig:
    """Validated runtime configuration.

    Attributes:
        chunk_element_limit: Maximum element count of one dataset chunk.
        filter_catalog_path: Optional YAML file with extra filter specs.
        measure_readback: Whether to time reading target datasets back.
        log_level: Minimum structured log level.
    """

    chunk_element_limit: int = DEFAULT_CHUNK_ELEMENT_LIMIT
    filter_catalog_path: Path | None = None
    measure_readback: bool = True
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "FilterBenchConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            FilterBenchConfigError: If environment values are invalid.
        """
        limit_value = os.getenv(
            "FILTERBENCH_CHUNK_ELEMENT_LIMIT", str(DEFAULT_CHUNK_ELEMENT_LIMIT)
        )
        catalog_value = os.getenv("FILTERBENCH_FILTER_CATALOG")
        readback_value = os.getenv("FILTERBENCH_MEASURE_READBACK", "true")
        log_level_value = os.getenv("FILTERBENCH_LOG_LEVEL", DEFAULT_LOG_LEVEL)
        return cls(
            chunk_element_limit=parse_chunk_element_limit(limit_value),
            filter_catalog_path=(
                Path(catalog_value).expanduser().resolve() if catalog_value else None
            ),
            measure_readback=_parse_bool(readback_value, "FILTERBENCH_MEASURE_READBACK"),
            log_level=_parse_log_level(log_level_value),
        )


def parse_chunk_element_limit(raw_value: str) -> int:
    """Parse a chunk element limit value.

    Args:
        raw_value: Raw string from environment or CLI.

    Returns:
        Positive element count.

    Raises:
        FilterBenchConfigError: If value is not a positive integer.
    """
    try:
        limit = int(raw_value)
    except ValueError as error:
        raise FilterBenchConfigError(
            "Invalid FILTERBENCH_CHUNK_ELEMENT_LIMIT value: "
            f"expected integer, got '{raw_value}'. "
            "Set it to a positive element count such as 1048576."
        ) from error
    if limit < 1:
        raise FilterBenchConfigError(
            f"Invalid chunk element limit {limit}: must be at least 1."
        )
    return limit


def _parse_bool(raw_value: str, variable_name: str) -> bool:
    normalized_value = raw_value.strip().lower()
    if normalized_value in _TRUE_VALUES:
        return True
    if normalized_value in _FALSE_VALUES:
        return False
    raise FilterBenchConfigError(
        f"Invalid {variable_name} value '{raw_value}'. "
        f"Use one of: {', '.join(_TRUE_VALUES + _FALSE_VALUES)}."
    )


def _parse_log_level(raw_value: str) -> str:
    normalized_value = raw_value.strip().lower()
    if normalized_value not in SUPPORTED_LOG_LEVELS:
        raise FilterBenchConfigError(
            f"Invalid FILTERBENCH_LOG_LEVEL value '{raw_value}'. "
            f"Use one of: {', '.join(SUPPORTED_LOG_LEVELS)}."
        )
    return normalized_value
