"""Typed YAML filter catalog parsing.

This module loads and validates YAML files that extend the default
filter registry with extra HDF5 plugin strategies. It keeps one strict
schema so catalog mistakes fail at startup instead of mid-benchmark.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence, cast

import yaml
from h5py import h5z

from core.constants import FILTER_CATALOG_VERSION
from core.errors import FilterBenchConfigError, FilterCatalogError
from core.types import FilterSpec, FilterStage

STAGE_NAME_IDS: Mapping[str, int] = {
    "deflate": h5z.FILTER_DEFLATE,
    "gzip": h5z.FILTER_DEFLATE,
    "shuffle": h5z.FILTER_SHUFFLE,
    "fletcher32": h5z.FILTER_FLETCHER32,
    "szip": h5z.FILTER_SZIP,
    "lzf": h5z.FILTER_LZF,
}
_ROOT_KEYS = {"version", "filters"}
_FILTER_KEYS = {"name", "stages", "filter_id", "requires_availability_check"}
_STAGE_KEYS = {"id", "options"}


def load_filter_catalog(catalog_path: Path | str) -> tuple[FilterSpec, ...]:
    """Load and validate a YAML filter catalog from disk.

    Args:
        catalog_path: File path to the YAML catalog.

    Returns:
        Filter specs in file order.

    Raises:
        FilterCatalogError: If the file is missing, unreadable, or invalid.
    """
    payload = _load_yaml_payload(Path(catalog_path))
    root_mapping = _expect_mapping(payload, "filter catalog root")
    _validate_keys(root_mapping, _ROOT_KEYS, "filter catalog root")
    _parse_version(root_mapping)
    raw_filters = root_mapping.get("filters")
    if raw_filters is None:
        raise FilterCatalogError(
            "Filter catalog missing required field 'filters'. Add a list of filter entries."
        )
    filter_rows = _expect_sequence(raw_filters, "filter catalog filters")
    return tuple(_parse_filter(row, index) for index, row in enumerate(filter_rows))


def _load_yaml_payload(catalog_path: Path) -> object:
    catalog_file = catalog_path.expanduser().resolve()
    if not catalog_file.exists():
        raise FilterCatalogError(
            f"Filter catalog does not exist at {catalog_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(catalog_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise FilterCatalogError(
            f"Failed to read filter catalog at {catalog_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise FilterCatalogError(
            f"Failed to parse YAML filter catalog at {catalog_file}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise FilterCatalogError(
            f"Filter catalog at {catalog_file} is empty. Define 'version' and 'filters'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise FilterCatalogError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise FilterCatalogError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise FilterCatalogError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _expect_int(value: object, context: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise FilterCatalogError(f"Invalid {context}: expected non-negative integer.")
    return value


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise FilterCatalogError(
            "Filter catalog field 'version' must be an integer. "
            f"Set version: {FILTER_CATALOG_VERSION}."
        )
    if raw_version != FILTER_CATALOG_VERSION:
        raise FilterCatalogError(
            f"Unsupported filter catalog version {raw_version}. "
            f"Use version: {FILTER_CATALOG_VERSION}."
        )
    return raw_version


def _parse_filter(filter_value: object, filter_index: int) -> FilterSpec:
    context = f"filter catalog entry #{filter_index + 1}"
    filter_mapping = _expect_mapping(filter_value, context)
    _validate_keys(filter_mapping, _FILTER_KEYS, context)
    raw_name = filter_mapping.get("name")
    if not isinstance(raw_name, str) or not raw_name.strip():
        raise FilterCatalogError(f"Invalid {context}: field 'name' must be a non-empty string.")
    raw_stages = filter_mapping.get("stages")
    if raw_stages is None:
        raise FilterCatalogError(f"Invalid {context}: field 'stages' is required.")
    stage_rows = _expect_sequence(raw_stages, f"{context} stages")
    if len(stage_rows) == 0:
        raise FilterCatalogError(
            f"Invalid {context}: 'stages' must include at least one filter stage."
        )
    stages = tuple(
        _parse_stage(row, f"{context} stage #{index + 1}") for index, row in enumerate(stage_rows)
    )
    filter_id = _parse_filter_id(filter_mapping, stages, context)
    requires_check = filter_mapping.get("requires_availability_check", filter_id is not None)
    if not isinstance(requires_check, bool):
        raise FilterCatalogError(
            f"Invalid {context}: 'requires_availability_check' must be true or false."
        )
    try:
        return FilterSpec(
            name=raw_name.strip(),
            stages=stages,
            requires_availability_check=requires_check,
            filter_id=filter_id,
        )
    except FilterBenchConfigError as error:
        raise FilterCatalogError(f"Invalid {context}: {error}") from error


def _parse_stage(stage_value: object, context: str) -> FilterStage:
    stage_mapping = _expect_mapping(stage_value, context)
    _validate_keys(stage_mapping, _STAGE_KEYS, context)
    raw_id = stage_mapping.get("id")
    label = ""
    if isinstance(raw_id, str):
        label = raw_id.strip().lower()
        if label not in STAGE_NAME_IDS:
            supported = ", ".join(sorted(STAGE_NAME_IDS))
            raise FilterCatalogError(
                f"Invalid {context}: unknown filter name '{raw_id}'. "
                f"Use a numeric id or one of: {supported}."
            )
        filter_id = STAGE_NAME_IDS[label]
    else:
        filter_id = _expect_int(raw_id, f"{context} id")
    raw_options = stage_mapping.get("options", [])
    option_rows = _expect_sequence(raw_options, f"{context} options")
    options = tuple(_expect_int(value, f"{context} option") for value in option_rows)
    return FilterStage(filter_id=filter_id, options=options, label=label or f"filter_{filter_id}")


def _parse_filter_id(
    filter_mapping: Mapping[str, object],
    stages: tuple[FilterStage, ...],
    context: str,
) -> int | None:
    raw_filter_id = filter_mapping.get("filter_id")
    if raw_filter_id is not None:
        return _expect_int(raw_filter_id, f"{context} filter_id")
    compressor_ids = [stage.filter_id for stage in stages if stage.is_compressor]
    return compressor_ids[0] if compressor_ids else None


def _validate_keys(mapping: Mapping[str, object], allowed_keys: set[str], context: str) -> None:
    unknown_keys = sorted(set(mapping) - allowed_keys)
    if unknown_keys:
        raise FilterCatalogError(f"Invalid {context}: unknown fields {', '.join(unknown_keys)}.")
