"""Unit tests for the filter registry."""

from __future__ import annotations

import pytest
from h5py import h5z

from core.errors import DuplicateFilterNameError, FilterBenchConfigError
from core.types import FilterSpec, FilterStage
from filters.registry import FilterRegistry

DEFLATE_STAGE = FilterStage(filter_id=h5z.FILTER_DEFLATE, options=(4,), label="deflate")


def _registry() -> FilterRegistry:
    return FilterRegistry(
        [
            FilterSpec(name="baseline_none"),
            FilterSpec(name="gzip_a", stages=(DEFLATE_STAGE,)),
            FilterSpec(name="gzip_b", stages=(DEFLATE_STAGE,)),
        ]
    )


def test_all_preserves_registration_order() -> None:
    """Registry should return specs in the order they were registered."""
    registry = _registry()

    assert registry.names() == ("baseline_none", "gzip_a", "gzip_b") and len(registry) == 3


def test_register_rejects_duplicate_name() -> None:
    """Registering one name twice should fail."""
    registry = _registry()

    with pytest.raises(DuplicateFilterNameError):
        registry.register(FilterSpec(name="gzip_a"))

    assert registry.names() == ("baseline_none", "gzip_a", "gzip_b")


def test_select_keeps_baseline_and_registration_order() -> None:
    """Selection should keep the baseline first and ignore argument order."""
    selected = _registry().select(["gzip_b", "gzip_a"])

    assert selected.names() == ("baseline_none", "gzip_a", "gzip_b")


def test_select_unknown_name_raises() -> None:
    """Unknown filter names should be rejected with the known names listed."""
    with pytest.raises(FilterBenchConfigError, match="gzip_a"):
        _registry().select(["missing"])


def test_registries_are_independent() -> None:
    """Two registry instances should not share state."""
    first = FilterRegistry()
    second = FilterRegistry()
    first.register(FilterSpec(name="baseline_none"))

    assert "baseline_none" in first and "baseline_none" not in second
