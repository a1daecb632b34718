"""Per-dataset storage policy construction.

This module computes chunk shapes, applies a filter spec's pipeline,
and materializes the resulting policy into h5py creation arguments.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from h5py import h5z

from core.constants import (
    DEFAULT_CHUNK_ELEMENT_LIMIT,
    SZIP_EC_OPTION_MASK,
    SZIP_NN_OPTION_MASK,
    SZIP_PIXELS_PER_BLOCK,
)
from core.errors import FilterBenchConfigError
from core.logging_config import get_logger
from core.types import FilterSpec, StoragePolicy
from filters.availability import FilterAvailability, is_filter_available

_LOGGER = get_logger(__name__)


def compute_chunk_shape(
    shape: tuple[int, ...],
    element_limit: int = DEFAULT_CHUNK_ELEMENT_LIMIT,
) -> tuple[int, ...]:
    """Halve a dataset shape until one chunk fits the element limit.

    Every extent above one is halved with rounding up on each pass, so
    extents never drop below one. Zero-rank shapes use one element.

    Args:
        shape: Dataset extents.
        element_limit: Maximum elements per chunk.

    Returns:
        Chunk extents with the same rank as ``shape``.
    """
    if element_limit < 1:
        raise FilterBenchConfigError(f"Chunk element limit must be positive, got {element_limit}.")
    if not shape:
        return (1,)
    chunk = [max(extent, 1) for extent in shape]
    while _element_count(chunk) > element_limit:
        chunk = [(extent + 1) // 2 if extent > 1 else extent for extent in chunk]
    return tuple(chunk)


def is_chunkable(shape: tuple[int, ...]) -> bool:
    """Return whether HDF5 accepts a chunked layout for this shape."""
    return bool(shape) and all(extent > 0 for extent in shape)


def build_storage_policy(
    shape: tuple[int, ...],
    spec: FilterSpec,
    *,
    element_limit: int = DEFAULT_CHUNK_ELEMENT_LIMIT,
    availability: FilterAvailability = is_filter_available,
    dataset_path: str = "",
) -> StoragePolicy:
    """Build a fresh storage policy for one target dataset.

    Args:
        shape: Dataset extents.
        spec: Active filter spec.
        element_limit: Maximum elements per chunk.
        availability: Probe for specs that require an availability check.
        dataset_path: Dataset path used in log events.

    Returns:
        New policy owned by this single dataset write.
    """
    if spec.is_baseline:
        return StoragePolicy.default()
    if not is_chunkable(shape):
        _LOGGER.debug(
            "storage_policy_unchunkable",
            path=dataset_path,
            shape=list(shape),
            filter_name=spec.name,
        )
        return StoragePolicy.default()
    chunked = StoragePolicy(chunk_shape=compute_chunk_shape(shape, element_limit))
    if spec.requires_availability_check and spec.filter_id is not None:
        if not availability(spec.filter_id):
            _LOGGER.warning(
                "filter_unavailable_fallback",
                path=dataset_path,
                filter_name=spec.name,
                filter_id=spec.filter_id,
            )
            return chunked
    return spec.configure(chunked)


def dataset_create_kwargs(policy: StoragePolicy) -> dict[str, Any]:
    """Translate a storage policy into ``Group.create_dataset`` kwargs.

    Args:
        policy: Policy to materialize.

    Returns:
        Keyword arguments for h5py dataset creation.
    """
    kwargs: dict[str, Any] = {}
    if policy.chunk_shape is not None:
        kwargs["chunks"] = policy.chunk_shape
    for stage in policy.stages:
        if stage.filter_id == h5z.FILTER_SHUFFLE:
            kwargs["shuffle"] = True
        elif stage.filter_id == h5z.FILTER_FLETCHER32:
            kwargs["fletcher32"] = True
        elif stage.filter_id == h5z.FILTER_DEFLATE:
            kwargs["compression"] = "gzip"
            if stage.options:
                kwargs["compression_opts"] = stage.options[0]
        elif stage.filter_id == h5z.FILTER_SZIP:
            kwargs["compression"] = "szip"
            kwargs["compression_opts"] = _szip_options(stage.options)
        elif stage.filter_id == h5z.FILTER_LZF:
            kwargs["compression"] = "lzf"
        else:
            kwargs["compression"] = stage.filter_id
            kwargs["compression_opts"] = stage.options
    return kwargs


def _szip_options(options: tuple[int, ...]) -> tuple[str, int]:
    """Map raw szip client values onto h5py's (coding, pixels) form."""
    option_mask = options[0] if options else SZIP_NN_OPTION_MASK
    pixels_per_block = options[1] if len(options) > 1 else SZIP_PIXELS_PER_BLOCK
    coding = "ec" if option_mask & SZIP_EC_OPTION_MASK else "nn"
    return coding, pixels_per_block


def _element_count(extents: list[int]) -> int:
    return int(np.prod(extents, dtype=np.int64))
