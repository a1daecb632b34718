"""Raw dataset read and policy-driven write primitives.

Reads keep the element type exactly as stored in the source file,
including byte order and h5py string or enum metadata. Writes create
missing parent groups and time the dataset create-and-write call.
"""

from __future__ import annotations

import time

import h5py
import numpy as np

from core.errors import DatasetReadError, DatasetWriteError
from core.types import RawDataset, StoragePolicy
from filters.storage_policy import dataset_create_kwargs


def read_raw_dataset(container: h5py.File, path: str) -> RawDataset:
    """Read one dataset fully into memory.

    Args:
        container: Open source container.
        path: Absolute dataset path.

    Returns:
        Dataset payload with type and shape.

    Raises:
        DatasetReadError: If the path is not a readable dataset.
    """
    try:
        node = container.get(path)
    except (KeyError, OSError, RuntimeError) as error:
        raise DatasetReadError(f"Failed to resolve dataset {path}: {error}.") from error
    if not isinstance(node, h5py.Dataset):
        raise DatasetReadError(f"Path {path} does not resolve to a dataset.")
    if node.shape is None:
        raise DatasetReadError(
            f"Dataset {path} has a null dataspace and holds no elements to transcode."
        )
    element_type = node.dtype
    shape = tuple(int(extent) for extent in node.shape)
    try:
        data = np.asarray(node[()], dtype=element_type)
    except (OSError, RuntimeError, TypeError, ValueError) as error:
        raise DatasetReadError(f"Failed to read dataset {path}: {error}.") from error
    raw = RawDataset(path=path, data=data, element_type=element_type, shape=shape)
    if data.shape != shape or data.nbytes != raw.byte_size:
        raise DatasetReadError(
            f"Dataset {path} returned {data.nbytes} bytes with shape {data.shape}; "
            f"expected {raw.byte_size} bytes with shape {shape}."
        )
    return raw


def write_dataset(
    container: h5py.File,
    path: str,
    raw: RawDataset,
    policy: StoragePolicy,
) -> float:
    """Create one dataset under a storage policy and write its data.

    Args:
        container: Open destination container.
        path: Absolute dataset path.
        raw: Payload read from the source.
        policy: Chunking and filter pipeline for this dataset.

    Returns:
        Elapsed wall-clock milliseconds of the create-and-write call.

    Raises:
        DatasetWriteError: If groups or the dataset cannot be created. A
            dataset left half-written by a failed write is removed first.
    """
    parent_path, _, leaf_name = path.rstrip("/").rpartition("/")
    if not leaf_name:
        raise DatasetWriteError(f"Cannot write a dataset at path '{path}'.")
    try:
        parent = container.require_group(parent_path or "/")
    except (OSError, RuntimeError, TypeError, ValueError) as error:
        raise DatasetWriteError(
            f"Failed to create parent group of dataset {path}: {error}."
        ) from error
    if leaf_name in parent:
        raise DatasetWriteError(
            f"Destination already holds an object at {path}. Write into a fresh container."
        )
    started_at = time.perf_counter()
    try:
        parent.create_dataset(
            leaf_name,
            shape=raw.shape,
            dtype=raw.element_type,
            data=raw.data,
            **dataset_create_kwargs(policy),
        )
    except (OSError, RuntimeError, TypeError, ValueError) as error:
        _discard_partial_dataset(parent, leaf_name)
        raise DatasetWriteError(f"Failed to write dataset {path}: {error}.") from error
    return (time.perf_counter() - started_at) * 1000.0


def _discard_partial_dataset(parent: h5py.Group, leaf_name: str) -> None:
    if leaf_name in parent:
        del parent[leaf_name]
