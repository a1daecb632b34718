"""FilterBench exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class FilterBenchError(Exception):
    """Base exception for all FilterBench failures."""


class FilterBenchConfigError(FilterBenchError):
    """Raised for invalid runtime configuration."""


class FilterCatalogError(FilterBenchConfigError):
    """Raised for invalid YAML filter catalog files."""


class DuplicateFilterNameError(FilterBenchConfigError):
    """Raised when two filter specs share one registry name."""


class ContainerOpenError(FilterBenchError):
    """Raised when a source or destination container cannot be opened."""


class BaselineFailureError(FilterBenchError):
    """Raised when the uncompressed baseline run cannot be produced."""


class DatasetReadError(FilterBenchError):
    """Raised when one source dataset cannot be read."""


class DatasetWriteError(FilterBenchError):
    """Raised when one destination dataset cannot be written."""


class FilterUnavailableError(FilterBenchError):
    """Raised when a filter plugin is not registered with HDF5."""
