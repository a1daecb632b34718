"""Target dataset selection by naming convention."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from core.constants import RECORD_GROUP_PATTERN, TARGET_DATASET_NAMES


@dataclass(frozen=True)
class TargetSelector:
    """Decide which datasets are transcoded under the active filter spec.

    A dataset is a target when its leaf name is a signal role and one of
    its ancestor groups follows the record naming convention.

    Attributes:
        dataset_names: Leaf names of signal datasets.
        record_group_pattern: Full-match regex for record group names.
    """

    dataset_names: tuple[str, ...] = TARGET_DATASET_NAMES
    record_group_pattern: str = RECORD_GROUP_PATTERN
    _compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled", re.compile(self.record_group_pattern))

    def is_target(self, dataset_path: str) -> bool:
        """Return whether one absolute dataset path is a transcoding target."""
        segments = [segment for segment in dataset_path.split("/") if segment]
        if not segments or segments[-1] not in self.dataset_names:
            return False
        return any(self._compiled.fullmatch(segment) for segment in segments[:-1])
