"""Index entries describing files and directories on registered disks."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime

from disco.disk import DiskId


class EntryType(enum.Enum):
    """Kind of an indexed entry."""

    FILE = "file"
    DIR = "dir"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def _missing_(cls, value: object) -> EntryType:
        raise ValueError(f"Invalid entry type: {value}")


class EntryStatus(enum.Enum):
    """Whether an entry is known to be present on its disk."""

    NORMAL = "normal"
    MISSING = "missing"
    PENDING_CONFIRM = "pending_confirm"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def _missing_(cls, value: object) -> EntryStatus:
        raise ValueError(f"Invalid entry status: {value}")


@dataclass
class IndexEntry:
    """A file or directory recorded in the index."""

    entry_id: int
    disk_id: DiskId
    disk_name: str
    relative_path: str
    file_name: str
    size: int
    mtime: datetime
    entry_type: EntryType
    last_seen_mount_point: str
    indexed_at: datetime
    hash: str | None = None
    solid_flag: bool = False
    status: EntryStatus = EntryStatus.NORMAL

    def full_path(self, mount_point: str) -> str:
        """Full path of the entry under the given mount point."""
        return f"{mount_point.rstrip('/')}/{self.relative_path}"

    def matches_keyword(self, keyword: str) -> bool:
        """Case-insensitive substring match on the file name."""
        return keyword.lower() in self.file_name.lower()

    def extension(self) -> str | None:
        """Text after the last dot of a file's name; None for directories."""
        if self.entry_type is not EntryType.FILE:
            return None
        return self.file_name.rsplit(".", 1)[-1]