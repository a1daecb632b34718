"""Built-in filter specs and default registry construction.

The default catalog starts with the uncompressed baseline, then the
standard HDF5 filters, then plugin compressors that need a runtime
availability probe, and finally entries from an optional YAML catalog.
"""

from __future__ import annotations

import hdf5plugin
from h5py import h5z

from core.config import FilterBenchConfig
from core.constants import (
    BASELINE_FILTER_NAME,
    GZIP_LEVELS,
    SZIP_NN_OPTION_MASK,
    SZIP_PIXELS_PER_BLOCK,
    VBZ_FILTER_ID,
    VBZ_LEVELS,
    ZSTD_LEVELS,
)
from core.filter_catalog import load_filter_catalog
from core.logging_config import get_logger
from core.types import FilterSpec, FilterStage
from filters.registry import FilterRegistry

_LOGGER = get_logger(__name__)

SHUFFLE_STAGE = FilterStage(filter_id=h5z.FILTER_SHUFFLE, label="shuffle")


def baseline_spec() -> FilterSpec:
    """Return the no-compression reference spec."""
    return FilterSpec(name=BASELINE_FILTER_NAME)


def gzip_spec(level: int) -> FilterSpec:
    """Return a byte-shuffle plus deflate spec for one level."""
    return FilterSpec(
        name=f"shuffle_gzip_lvl{level}",
        stages=(
            SHUFFLE_STAGE,
            FilterStage(filter_id=h5z.FILTER_DEFLATE, options=(level,), label="deflate"),
        ),
        filter_id=h5z.FILTER_DEFLATE,
    )


def szip_spec() -> FilterSpec:
    """Return the nearest-neighbour szip spec."""
    return FilterSpec(
        name="szip",
        stages=(
            FilterStage(
                filter_id=h5z.FILTER_SZIP,
                options=(SZIP_NN_OPTION_MASK, SZIP_PIXELS_PER_BLOCK),
                label="szip",
            ),
        ),
        requires_availability_check=True,
        filter_id=h5z.FILTER_SZIP,
    )


def vbz_spec(level: int) -> FilterSpec:
    """Return a VBZ spec; client values are (version, zstd level, size, delta)."""
    return FilterSpec(
        name=f"vbz_lvl{level}",
        stages=(FilterStage(filter_id=VBZ_FILTER_ID, options=(0, level, 1, 1), label="vbz"),),
        requires_availability_check=True,
        filter_id=VBZ_FILTER_ID,
    )


def plugin_spec(name: str, plugin: hdf5plugin.FilterBase) -> FilterSpec:
    """Wrap one hdf5plugin filter configuration as an availability-checked spec.

    Args:
        name: Registry name.
        plugin: Configured hdf5plugin filter instance.

    Returns:
        Filter spec holding the plugin's id and client values.
    """
    filter_id = int(plugin.filter_id)
    return FilterSpec(
        name=name,
        stages=(
            FilterStage(
                filter_id=filter_id,
                options=tuple(int(value) for value in plugin.filter_options),
                label=type(plugin).__name__.lower(),
            ),
        ),
        requires_availability_check=True,
        filter_id=filter_id,
    )


def register_builtin_filters(registry: FilterRegistry) -> None:
    """Register baseline, gzip, szip, and VBZ strategies."""
    registry.register(baseline_spec())
    for level in GZIP_LEVELS:
        registry.register(gzip_spec(level))
    registry.register(szip_spec())
    for level in VBZ_LEVELS:
        registry.register(vbz_spec(level))


def register_plugin_filters(registry: FilterRegistry) -> None:
    """Register compressors bundled with hdf5plugin."""
    registry.register(plugin_spec("lz4", hdf5plugin.LZ4()))
    for level in ZSTD_LEVELS:
        registry.register(plugin_spec(f"zstd_lvl{level}", hdf5plugin.Zstd(clevel=level)))
    registry.register(plugin_spec("bitshuffle_lz4", hdf5plugin.Bitshuffle(cname="lz4")))


def build_default_registry(config: FilterBenchConfig) -> FilterRegistry:
    """Build the process filter catalog for one benchmark.

    Args:
        config: Runtime configuration with the optional catalog path.

    Returns:
        Populated registry, baseline first.

    Raises:
        FilterCatalogError: If the configured catalog is invalid.
        DuplicateFilterNameError: If a catalog entry reuses a name.
    """
    registry = FilterRegistry()
    register_builtin_filters(registry)
    register_plugin_filters(registry)
    if config.filter_catalog_path is not None:
        for spec in load_filter_catalog(config.filter_catalog_path):
            registry.register(spec)
    _LOGGER.debug("filter_registry_built", filter_count=len(registry))
    return registry
