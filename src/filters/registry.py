"""In-process catalog of named filter specs.

The registry is an explicit instance owned by one benchmark run, so
several independent runs can coexist in one process.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from core.errors import DuplicateFilterNameError, FilterBenchConfigError
from core.types import FilterSpec


class FilterRegistry:
    """Ordered, name-unique collection of filter specs."""

    def __init__(self, specs: Iterable[FilterSpec] = ()) -> None:
        self._specs: list[FilterSpec] = []
        self._names: set[str] = set()
        for spec in specs:
            self.register(spec)

    def register(self, spec: FilterSpec) -> None:
        """Append one filter spec to the catalog.

        Args:
            spec: Filter spec to register.

        Raises:
            DuplicateFilterNameError: If the name is already registered.
        """
        if spec.name in self._names:
            raise DuplicateFilterNameError(
                f"Filter spec '{spec.name}' is already registered. "
                "Rename the catalog entry so every filter name is unique."
            )
        self._specs.append(spec)
        self._names.add(spec.name)

    def all(self) -> tuple[FilterSpec, ...]:
        """Return specs in registration order, baseline first."""
        return tuple(self._specs)

    def names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self._specs)

    def get(self, name: str) -> FilterSpec:
        """Return one spec by name.

        Raises:
            FilterBenchConfigError: If no spec has this name.
        """
        for spec in self._specs:
            if spec.name == name:
                return spec
        raise FilterBenchConfigError(
            f"Unknown filter '{name}'. Choose one of: {', '.join(self.names())}."
        )

    def select(self, names: Iterable[str]) -> "FilterRegistry":
        """Build a registry holding the baseline plus the named specs.

        Args:
            names: Filter names to keep.

        Returns:
            New registry preserving the original registration order.

        Raises:
            FilterBenchConfigError: If a name is unknown or no baseline exists.
        """
        wanted = set(names)
        for name in wanted:
            self.get(name)
        if not self._specs:
            raise FilterBenchConfigError("Cannot select filters from an empty registry.")
        baseline = self._specs[0]
        return FilterRegistry(
            [baseline]
            + [spec for spec in self._specs[1:] if spec.name in wanted]
        )

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[FilterSpec]:
        return iter(tuple(self._specs))

    def __len__(self) -> int:
        return len(self._specs)
