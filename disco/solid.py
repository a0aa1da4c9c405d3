"""Solid-layer depth rules and atomic storage units."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

U32_MAX = 0xFFFFFFFF

_NUMBER = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True)
class SolidLayerDepth:
    """How deep an input may be split; ``levels=None`` means down to single files."""

    levels: int | None = 0

    @property
    def is_infinite(self) -> bool:
        return self.levels is None

    @staticmethod
    def parse(text: str) -> SolidLayerDepth:
        """Parse '0', '1', '2', a larger number, 'inf' or 'infinite'."""
        lowered = text.lower()
        if lowered in ("0", "1", "2"):
            return SolidLayerDepth(int(lowered))
        if lowered in ("inf", "infinite"):
            return SolidLayerDepth(None)
        if not _NUMBER.fullmatch(lowered) or int(lowered) > U32_MAX:
            raise ValueError(f"Invalid SolidLayer value: {text}")
        number = int(lowered)
        if number > 2:
            return SolidLayerDepth(number)
        raise ValueError(f"Use '0', '1', '2', 'n', or 'inf' instead of {text}")

    def min_depth(self) -> int:
        """Minimum depth of an atomic unit."""
        return U32_MAX if self.levels is None else self.levels

    def can_split_at(self, depth: int) -> bool:
        """Whether splitting is allowed at the given depth."""
        return self.min_depth() <= depth

    def __str__(self) -> str:
        return "inf" if self.levels is None else str(self.levels)


@dataclass
class AtomicUnit:
    """A unit of storage that must not be split across disks."""

    root_path: str
    name: str
    relative_path: str | None = None
    size: int = 0
    depth: int = 0
    is_solid_marked: bool = False
    file_count: int = field(default=0)

    def __post_init__(self) -> None:
        if self.relative_path is None:
            self.relative_path = self.name