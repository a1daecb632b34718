"""Runtime probes for HDF5 filter availability.

Importing ``hdf5plugin`` registers its bundled compressors with the HDF5
library, so plugin filters are visible to every probe made here.
"""

from __future__ import annotations

from typing import Callable

import hdf5plugin  # noqa: F401
from h5py import h5z

from core.errors import FilterUnavailableError
from core.types import FilterSpec

FilterAvailability = Callable[[int], bool]


def is_filter_available(filter_id: int) -> bool:
    """Return whether HDF5 can encode data with one filter.

    Args:
        filter_id: HDF5 filter identifier.

    Returns:
        True when the filter is registered and its encoder is enabled.
    """
    try:
        if not h5z.filter_avail(filter_id):
            return False
        filter_info = h5z.get_filter_info(filter_id)
    except (OverflowError, RuntimeError, ValueError):
        return False
    return bool(filter_info & h5z.FILTER_CONFIG_ENCODE_ENABLED)


def ensure_filter_available(
    spec: FilterSpec,
    availability: FilterAvailability = is_filter_available,
) -> None:
    """Check the backing filter of a spec that requires a probe.

    Args:
        spec: Filter spec to check.
        availability: Probe used to test the filter id.

    Raises:
        FilterUnavailableError: If the spec's filter cannot be used.
    """
    if not spec.requires_availability_check or spec.filter_id is None:
        return
    if not availability(spec.filter_id):
        raise FilterUnavailableError(
            f"Filter '{spec.name}' (HDF5 filter id {spec.filter_id}) is not available. "
            "Install the plugin or point HDF5_PLUGIN_PATH at its shared library."
        )
