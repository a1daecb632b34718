"""Unit tests for recursive container mirroring."""

from __future__ import annotations

import h5py
import numpy as np
import pytest

from core.config import FilterBenchConfig
from core.types import FilterSpec, FilterStage
from filters.availability import is_filter_available
from filters.builtin_filters import baseline_spec, build_default_registry, gzip_spec
from transcode.graph_walker import mirror_container

UNAVAILABLE_ID = 60123


def _object_kinds(container: h5py.File) -> dict[str, str]:
    kinds: dict[str, str] = {}

    def _visit(name: str, node: object) -> None:
        kinds[name] = type(node).__name__

    container.visititems(_visit)
    return kinds


def test_mirror_container_compresses_only_targets(tmp_path, source_container) -> None:
    """Raw under a read group is filtered; sibling datasets keep default storage."""
    with h5py.File(source_container, "r") as source, h5py.File(tmp_path / "o.h5", "w") as dest:
        summary = mirror_container(source, dest, gzip_spec(6))
        raw = dest["/read_0001/Raw"]
        other = dest["/read_0001/Other"]
        untargeted_signal = dest["/Analyses/Basecall_000/Signal"]

        assert (
            raw.compression == "gzip"
            and raw.chunks is not None
            and other.compression is None
            and other.chunks is None
            and untargeted_signal.compression is None
            and summary.target_count == 2
            and summary.dataset_count == 6
            and not summary.skipped_paths
        )


def test_mirror_container_preserves_structure_and_values(tmp_path, source_container) -> None:
    """Destination graph should be isomorphic with identical data and attributes."""
    with h5py.File(source_container, "r") as source, h5py.File(tmp_path / "o.h5", "w") as dest:
        mirror_container(source, dest, gzip_spec(9))

        assert (
            _object_kinds(dest) == _object_kinds(source)
            and np.array_equal(dest["/read_0002/Raw"][()], source["/read_0002/Raw"][()])
            and dest.attrs["file_version"] == "2.0"
            and dest["read_0002"].attrs["read_number"] == 2
            and dest["/read_0001/Raw"].attrs["units"] == "pA"
        )


def test_mirror_container_baseline_never_filters_targets(tmp_path, source_container) -> None:
    """Baseline spec should leave target datasets contiguous and unfiltered."""
    with h5py.File(source_container, "r") as source, h5py.File(tmp_path / "o.h5", "w") as dest:
        summary = mirror_container(source, dest, baseline_spec())
        raw = dest["/read_0001/Raw"]

        assert raw.chunks is None and raw.compression is None and summary.target_count == 2


def test_mirror_container_falls_back_when_filter_unavailable(tmp_path, source_container) -> None:
    """Unavailable filter should write targets unfiltered instead of failing."""
    spec = FilterSpec(
        name="ghost",
        stages=(FilterStage(filter_id=UNAVAILABLE_ID),),
        requires_availability_check=True,
        filter_id=UNAVAILABLE_ID,
    )
    with h5py.File(source_container, "r") as source, h5py.File(tmp_path / "o.h5", "w") as dest:
        summary = mirror_container(source, dest, spec, availability=lambda filter_id: False)
        raw = dest["/read_0001/Raw"]

        assert raw.compression is None and raw.chunks is not None and not summary.skipped_paths


def test_mirror_container_skips_links_and_null_datasets(tmp_path) -> None:
    """Soft links are skipped and unreadable datasets are recorded, not raised."""
    source_path = tmp_path / "links.h5"
    with h5py.File(source_path, "w") as source:
        source.create_dataset("read_1/Raw", data=np.arange(10, dtype=np.uint8))
        source["alias"] = h5py.SoftLink("/read_1/Raw")
        source.create_dataset("empty", data=h5py.Empty("f4"))

    with h5py.File(source_path, "r") as source, h5py.File(tmp_path / "o.h5", "w") as dest:
        summary = mirror_container(source, dest, gzip_spec(1))

        assert (
            "alias" not in dest
            and "empty" not in dest
            and summary.skipped_paths == ["/empty"]
            and summary.dataset_count == 1
        )


def test_mirror_container_accumulates_target_write_time(tmp_path, source_container) -> None:
    """Transcode time should be recorded for target writes."""
    with h5py.File(source_container, "r") as source, h5py.File(tmp_path / "o.h5", "w") as dest:
        summary = mirror_container(source, dest, gzip_spec(1))

        assert summary.transcode_millis > 0.0


def test_mirror_container_relinks_hard_link_cycles(tmp_path) -> None:
    """A group linking back to itself should be mirrored once and linked again."""
    source_path = tmp_path / "cycle.h5"
    with h5py.File(source_path, "w") as source:
        record = source.create_group("read_1")
        record.create_dataset("Raw", data=np.arange(100, dtype=np.int16))
        record["loop"] = record

    with h5py.File(source_path, "r") as source, h5py.File(tmp_path / "o.h5", "w") as dest:
        summary = mirror_container(source, dest, gzip_spec(1))

        assert (
            _object_kinds(dest) == _object_kinds(source)
            and dest["read_1/loop"] == dest["read_1"]
            and summary.group_count == 1
            and summary.target_count == 1
            and not summary.skipped_paths
        )


def test_mirror_container_writes_shared_datasets_once(tmp_path) -> None:
    """A dataset reachable through two hard links should be written once."""
    source_path = tmp_path / "shared.h5"
    with h5py.File(source_path, "w") as source:
        raw = source.create_dataset("read_1/Raw", data=np.arange(100, dtype=np.int16))
        source.create_group("read_2")
        source["read_2/Raw"] = raw

    with h5py.File(source_path, "r") as source, h5py.File(tmp_path / "o.h5", "w") as dest:
        summary = mirror_container(source, dest, gzip_spec(1))

        assert (
            dest["read_2/Raw"] == dest["read_1/Raw"]
            and summary.dataset_count == 1
            and _object_kinds(dest) == _object_kinds(source)
        )


def test_mirror_container_drops_failed_writes(tmp_path, source_container, monkeypatch) -> None:
    """Datasets whose write fails are recorded as skipped and absent from the output."""
    create_dataset = h5py.Group.create_dataset

    def _create_then_fail(self, name, shape=None, dtype=None, data=None, **kwargs):
        create_dataset(self, name, shape=shape, dtype=dtype, **kwargs)
        raise OSError("Can't write data")

    with h5py.File(source_container, "r") as source, h5py.File(tmp_path / "o.h5", "w") as dest:
        monkeypatch.setattr(h5py.Group, "create_dataset", _create_then_fail)
        summary = mirror_container(source, dest, gzip_spec(1))
        written_datasets = [
            kind for kind in _object_kinds(dest).values() if kind == "Dataset"
        ]

        assert (
            "/read_0001/Raw" in summary.skipped_paths
            and "Raw" not in dest["read_0001"]
            and not written_datasets
            and summary.dataset_count == 0
        )


@pytest.mark.parametrize(
    "spec",
    build_default_registry(FilterBenchConfig()).all()[1:],
    ids=lambda spec: spec.name,
)
def test_every_registered_filter_mirrors_the_baseline_graph(
    tmp_path, source_container, spec
) -> None:
    """Each available filter should produce the same paths and node kinds as the baseline."""
    if spec.requires_availability_check and not is_filter_available(spec.filter_id):
        pytest.skip(f"filter {spec.filter_id} is not available")
    with h5py.File(source_container, "r") as source:
        with h5py.File(tmp_path / "baseline.h5", "w") as baseline:
            mirror_container(source, baseline, baseline_spec())
            baseline_kinds = _object_kinds(baseline)
        with h5py.File(tmp_path / "filtered.h5", "w") as filtered:
            summary = mirror_container(source, filtered, spec)
            filtered_kinds = _object_kinds(filtered)
            raw = filtered["/read_0001/Raw"][()]

        assert (
            filtered_kinds == baseline_kinds
            and not summary.skipped_paths
            and np.array_equal(raw, source["/read_0001/Raw"][()])
        )
