"""Unit tests for benchmark orchestration."""

from __future__ import annotations

import h5py
import pytest

from bench.orchestrator import BenchmarkRunner
from core.config import FilterBenchConfig
from core.errors import BaselineFailureError, ContainerOpenError
from core.types import FilterSpec, FilterStage
from filters.builtin_filters import baseline_spec, gzip_spec
from filters.registry import FilterRegistry

UNAVAILABLE_ID = 60123


def _ghost_spec() -> FilterSpec:
    return FilterSpec(
        name="ghost",
        stages=(FilterStage(filter_id=UNAVAILABLE_ID),),
        requires_availability_check=True,
        filter_id=UNAVAILABLE_ID,
    )


def _runner(*specs: FilterSpec, measure_readback: bool = False) -> BenchmarkRunner:
    config = FilterBenchConfig(measure_readback=measure_readback)
    return BenchmarkRunner(FilterRegistry(specs), config)


def test_run_reports_baseline_first_with_unit_ratio(source_container, output_dir) -> None:
    """Baseline result should lead with ratio one and zero reduction."""
    results = _runner(baseline_spec(), gzip_spec(6)).run(source_container, output_dir)
    baseline = results[0]

    assert (
        baseline.filter_name == "baseline_none"
        and baseline.ratio_vs_baseline == 1.0
        and baseline.reduction_percent == 0.0
        and baseline.output_byte_size > 0
    )


def test_run_gzip_shrinks_repetitive_signal(source_container, output_dir) -> None:
    """Compressed output should be smaller than the baseline container."""
    results = _runner(baseline_spec(), gzip_spec(6)).run(source_container, output_dir)
    gzip_result = results[1]

    assert (
        gzip_result.filter_name == "shuffle_gzip_lvl6"
        and gzip_result.ratio_vs_baseline < 1.0
        and gzip_result.reduction_percent > 0.0
        and gzip_result.cumulative_transcode_millis > 0.0
        and (output_dir / "shuffle_gzip_lvl6.h5").is_file()
    )


def test_run_skips_unavailable_filters(source_container, output_dir) -> None:
    """Unavailable specs are omitted while later specs still run."""
    results = _runner(baseline_spec(), _ghost_spec(), gzip_spec(1)).run(
        source_container, output_dir
    )

    assert (
        [result.filter_name for result in results] == ["baseline_none", "shuffle_gzip_lvl1"]
        and not (output_dir / "ghost.h5").exists()
    )


def test_run_output_container_mirrors_source(source_container, output_dir) -> None:
    """Each output container should hold the same record groups as the source."""
    _runner(baseline_spec(), gzip_spec(9)).run(source_container, output_dir)

    with h5py.File(output_dir / "shuffle_gzip_lvl9.h5", "r") as container:
        assert (
            set(container.keys()) == {"Analyses", "read_0001", "read_0002"}
            and container["/read_0002/Raw"].compression == "gzip"
        )


def test_run_is_repeatable(source_container, output_dir) -> None:
    """Rerunning into the same directory should replace outputs with equal sizes."""
    runner = _runner(baseline_spec(), gzip_spec(6))
    first = runner.run(source_container, output_dir)
    second = runner.run(source_container, output_dir)

    assert [result.output_byte_size for result in first] == [
        result.output_byte_size for result in second
    ]


def test_run_measures_readback_when_enabled(source_container, output_dir) -> None:
    """Read-back timing should be recorded when configured."""
    results = _runner(baseline_spec(), gzip_spec(6), measure_readback=True).run(
        source_container, output_dir
    )

    assert all(result.readback_millis > 0.0 for result in results)


def test_run_raises_for_missing_source(tmp_path, output_dir) -> None:
    """Unopenable sources should raise an open error."""
    with pytest.raises(ContainerOpenError, match="source container"):
        _runner(baseline_spec()).run(tmp_path / "missing.h5", output_dir)


def test_run_requires_baseline_first(source_container, output_dir) -> None:
    """Registries not led by a baseline spec should be rejected."""
    with pytest.raises(BaselineFailureError, match="baseline"):
        _runner(gzip_spec(6)).run(source_container, output_dir)
