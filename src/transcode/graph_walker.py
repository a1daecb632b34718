"""Recursive mirroring of a source object graph under one filter spec.

The walker visits groups depth-first, recreates every group and
dataset at the same path in the destination, and routes target
datasets through the active spec's storage policy. Failures on one
object are logged and recorded, never raised to the caller.
"""

from __future__ import annotations

import h5py

from core.constants import DEFAULT_CHUNK_ELEMENT_LIMIT
from core.errors import DatasetReadError, DatasetWriteError
from core.logging_config import get_logger
from core.types import FilterSpec, StoragePolicy, WalkSummary
from filters.availability import FilterAvailability, is_filter_available
from filters.storage_policy import build_storage_policy
from transcode.attribute_copy import copy_attributes
from transcode.dataset_io import read_raw_dataset, write_dataset
from transcode.target_selection import TargetSelector

_LOGGER = get_logger(__name__)


class ContainerGraphWalker:
    """Mirror one source container into one destination container."""

    def __init__(
        self,
        source: h5py.File,
        destination: h5py.File,
        spec: FilterSpec,
        selector: TargetSelector | None = None,
        *,
        element_limit: int = DEFAULT_CHUNK_ELEMENT_LIMIT,
        availability: FilterAvailability = is_filter_available,
    ) -> None:
        self._source = source
        self._destination = destination
        self._spec = spec
        self._selector = selector or TargetSelector()
        self._element_limit = element_limit
        self._availability = availability
        self._summary = WalkSummary(filter_name=spec.name)
        # source object id -> first destination path it was mirrored at
        self._mirrored: dict[object, str] = {}

    def walk(self) -> WalkSummary:
        """Mirror the full graph starting at the root group.

        Objects reachable through several hard links, including groups
        that link back to an ancestor, are mirrored once and linked again
        at every further path.

        Returns:
            Counters and skipped paths for this walk.
        """
        copy_attributes(self._source, "/", self._destination)
        root = self._source["/"]
        self._mirrored[root.id] = "/"
        self._walk_group(root, "/")
        _LOGGER.info(
            "graph_walk_completed",
            filter_name=self._spec.name,
            groups=self._summary.group_count,
            datasets=self._summary.dataset_count,
            targets=self._summary.target_count,
            skipped=len(self._summary.skipped_paths),
            transcode_ms=round(self._summary.transcode_millis, 3),
        )
        return self._summary

    def _walk_group(self, source_group: h5py.Group, group_path: str) -> None:
        for child_name in source_group:
            child_path = _join_path(group_path, child_name)
            link = source_group.get(child_name, getlink=True)
            if not isinstance(link, h5py.HardLink):
                _LOGGER.debug(
                    "object_skipped", path=child_path, kind=type(link).__name__
                )
                continue
            child_class = source_group.get(child_name, getclass=True)
            if child_class not in (h5py.Group, h5py.Dataset):
                _LOGGER.debug(
                    "object_skipped", path=child_path, kind=getattr(child_class, "__name__", "")
                )
                continue
            child = source_group[child_name]
            first_path = self._mirrored.get(child.id)
            if first_path is not None:
                self._link_mirrored(first_path, child_path)
            elif child_class is h5py.Group:
                self._mirror_group(child, child_path)
            else:
                self._mirror_dataset(child, child_path)

    def _mirror_group(self, source_group: h5py.Group, group_path: str) -> None:
        try:
            self._destination.require_group(group_path)
        except (OSError, RuntimeError, TypeError, ValueError) as error:
            self._record_skip(group_path, "group_create_failed", error)
            return
        self._mirrored[source_group.id] = group_path
        self._summary.group_count += 1
        copy_attributes(self._source, group_path, self._destination)
        self._walk_group(source_group, group_path)

    def _link_mirrored(self, first_path: str, link_path: str) -> None:
        try:
            self._destination[link_path] = self._destination[first_path]
        except (KeyError, OSError, RuntimeError, TypeError, ValueError) as error:
            self._record_skip(link_path, "hard_link_failed", error)
            return
        _LOGGER.debug("hard_link_mirrored", path=link_path, target=first_path)

    def _mirror_dataset(self, source_dataset: h5py.Dataset, dataset_path: str) -> None:
        try:
            raw = read_raw_dataset(self._source, dataset_path)
        except DatasetReadError as error:
            self._record_skip(dataset_path, "dataset_read_failed", error)
            return
        is_target = self._selector.is_target(dataset_path)
        policy = self._policy_for(dataset_path, raw.shape, is_target)
        try:
            write_millis = write_dataset(self._destination, dataset_path, raw, policy)
        except DatasetWriteError as error:
            self._record_skip(dataset_path, "dataset_write_failed", error)
            return
        self._mirrored[source_dataset.id] = dataset_path
        self._summary.dataset_count += 1
        if is_target:
            self._summary.target_count += 1
            self._summary.transcode_millis += write_millis
        copy_attributes(self._source, dataset_path, self._destination)

    def _policy_for(
        self,
        dataset_path: str,
        shape: tuple[int, ...],
        is_target: bool,
    ) -> StoragePolicy:
        if not is_target:
            return StoragePolicy.default()
        return build_storage_policy(
            shape,
            self._spec,
            element_limit=self._element_limit,
            availability=self._availability,
            dataset_path=dataset_path,
        )

    def _record_skip(self, path: str, event: str, error: Exception) -> None:
        self._summary.skipped_paths.append(path)
        _LOGGER.warning(event, path=path, filter_name=self._spec.name, error=str(error))


def mirror_container(
    source: h5py.File,
    destination: h5py.File,
    spec: FilterSpec,
    selector: TargetSelector | None = None,
    *,
    element_limit: int = DEFAULT_CHUNK_ELEMENT_LIMIT,
    availability: FilterAvailability = is_filter_available,
) -> WalkSummary:
    """Mirror ``source`` into ``destination`` under one filter spec.

    Args:
        source: Open source container.
        destination: Open, empty destination container.
        spec: Active filter spec.
        selector: Target dataset selector.
        element_limit: Maximum elements per chunk.
        availability: Filter availability probe.

    Returns:
        Walk counters for the run.
    """
    walker = ContainerGraphWalker(
        source,
        destination,
        spec,
        selector,
        element_limit=element_limit,
        availability=availability,
    )
    return walker.walk()


def _join_path(group_path: str, child_name: str) -> str:
    if group_path == "/":
        return f"/{child_name}"
    return f"{group_path}/{child_name}"
