"""Storage plans assigning atomic units to target disks."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field, replace

from disco.disk import DiskId
from disco.solid import AtomicUnit


@dataclass
class PlanItem:
    """One atomic unit and where it will be stored."""

    unit: AtomicUnit
    target_disk: DiskId
    target_disk_name: str
    target_relative_path: str


@dataclass
class StorePlan:
    """A complete plan for storing a batch of inputs."""

    items: list[PlanItem]
    total_size: int = 0
    total_files: int = 0
    dedup_applied: bool = False
    skipped_files: int = 0
    skipped_descriptions: list[str] = field(default_factory=list)

    @classmethod
    def from_items(cls, items: list[PlanItem]) -> StorePlan:
        """Build a plan whose totals are summed from its items."""
        items = list(items)
        return cls(
            items=items,
            total_size=sum(item.unit.size for item in items),
            total_files=sum(item.unit.file_count for item in items),
        )

    def with_dedup(self, skipped: list[str]) -> StorePlan:
        """Copy of this plan recording the files skipped by deduplication."""
        skipped = list(skipped)
        return replace(
            self,
            items=list(self.items),
            dedup_applied=True,
            skipped_files=len(skipped),
            skipped_descriptions=skipped,
        )

    def is_empty(self) -> bool:
        return not self.items

    def items_for_disk(self, disk_id: DiskId) -> list[PlanItem]:
        """Items that target the given disk."""
        return [item for item in self.items if item.target_disk == disk_id]

    def space_per_disk(self) -> dict[DiskId, int]:
        """Bytes needed on each target disk."""
        totals: dict[DiskId, int] = defaultdict(int)
        for item in self.items:
            totals[item.target_disk] += item.unit.size
        return dict(totals)