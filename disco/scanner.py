"""Walking a mounted disk and recording its files and directories in the index."""

from __future__ import annotations

import itertools
import os
import stat
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol, TextIO

from disco.disk import Disk, DiskId
from disco.entry import EntryStatus, EntryType, IndexEntry
from disco.filecopy import _walk
from disco.hasher import hash_file

_SPINNER_FRAMES = "⠁⠂⠄⡀⢀⠠⠐⠈"
_BAR_WIDTH = 40


class EntryStore(Protocol):
    def get_entries_by_disk(self, disk_id: DiskId) -> list[IndexEntry]: ...

    def upsert_entry(self, entry: IndexEntry) -> None: ...

    def mark_missing(self, disk_id: DiskId, relative_path: str) -> None: ...


class DiskStore(Protocol):
    def update_last_mount_point(self, disk_id: DiskId, mount_point: str) -> None: ...


def format_size(size: int) -> str:
    """Format a byte count with two decimals."""
    for unit, factor in (("GB", 1024**3), ("MB", 1024**2), ("KB", 1024)):
        if size >= factor:
            return f"{size / factor:.2f} {unit}"
    return f"{size} B"


class ScanProgress:
    """Terminal progress display for a scan: a spinner, or a bar when the total is known."""

    def __init__(self, total_estimate: int = 0, stream: Optional[TextIO] = None) -> None:
        self._stream = stream if stream is not None else sys.stderr
        self.total: Optional[int] = total_estimate or None
        self.files_scanned = 0
        self.dirs_scanned = 0
        self.total_size = 0
        self.message = "" if self.total else "Scanning..."
        self._frames = itertools.cycle(_SPINNER_FRAMES)

    @classmethod
    def spinner(cls, stream: Optional[TextIO] = None) -> ScanProgress:
        """A progress display with no known total."""
        return cls(0, stream)

    @property
    def has_total(self) -> bool:
        return self.total is not None

    def _summary(self) -> str:
        return (
            f"{self.files_scanned} files, {self.dirs_scanned} dirs, "
            f"{format_size(self.total_size)}"
        )

    def _draw(self) -> None:
        if self.total is not None:
            filled = min(_BAR_WIDTH, self.files_scanned * _BAR_WIDTH // self.total)
            bar = "#" * filled + "-" * (_BAR_WIDTH - filled)
            line = f"[{bar}] {self.files_scanned}/{self.total} files"
        else:
            line = f"{next(self._frames)} {self.message}"
        self._stream.write("\r" + line)
        self._stream.flush()

    def set_message(self, message: str) -> None:
        self.message = message
        self._draw()

    def inc_file(self, size: int) -> None:
        self.files_scanned += 1
        self.total_size += size
        if self.has_total:
            self._draw()
        else:
            self.set_message(f"Scanned {self._summary()}")

    def inc_dir(self) -> None:
        self.dirs_scanned += 1
        if not self.has_total:
            self.set_message(f"Scanned {self._summary()}")

    def finish(self) -> None:
        self.message = f"Done: {self._summary()}"
        self._stream.write("\r" + self.message + "\n")
        self._stream.flush()

    def report(self) -> tuple[int, int, int]:
        """Files scanned, directories scanned and total bytes."""
        return self.files_scanned, self.dirs_scanned, self.total_size


@dataclass
class ScanReport:
    """Counts of what a scan added, updated and marked missing."""

    files_added: int = 0
    files_updated: int = 0
    files_marked_missing: int = 0
    dirs_added: int = 0
    dirs_updated: int = 0
    errors: list[str] = field(default_factory=list)

    def total_entries(self) -> int:
        return self.files_added + self.files_updated + self.dirs_added + self.dirs_updated

    def _count(self, entry_type: EntryType, existed: bool) -> None:
        if entry_type is EntryType.FILE:
            if existed:
                self.files_updated += 1
            else:
                self.files_added += 1
        elif existed:
            self.dirs_updated += 1
        else:
            self.dirs_added += 1


def _index_tree(
    disk: Disk,
    mount_point: str | os.PathLike[str],
    root: str | os.PathLike[str],
    entry_repo: EntryStore,
    compute_hash: bool,
    progress: ScanProgress,
    report: ScanReport,
    existing_paths: set[str],
    lenient: bool,
) -> set[str]:
    """Index everything under root relative to mount_point; return the paths seen."""
    mount = Path(mount_point)
    mount_text = os.fspath(mount_point)
    seen: set[str] = set()

    for path, _is_dir, _is_file in _walk(Path(root)):
        try:
            relative = str(path.relative_to(mount))
        except ValueError:
            continue
        if relative in ("", "."):
            continue

        seen.add(relative)

        try:
            metadata = os.lstat(path)
        except OSError:
            if lenient:
                continue
            raise
        mtime = datetime.fromtimestamp(metadata.st_mtime, timezone.utc)

        if stat.S_ISDIR(metadata.st_mode):
            progress.inc_dir()
            entry_type, size = EntryType.DIR, 0
        else:
            size = metadata.st_size
            progress.inc_file(size)
            entry_type = EntryType.FILE

        file_hash: Optional[str] = None
        if compute_hash and stat.S_ISREG(metadata.st_mode):
            try:
                file_hash = hash_file(path)
            except OSError:
                if not lenient:
                    raise

        entry_repo.upsert_entry(
            IndexEntry(
                entry_id=0,
                disk_id=disk.disk_id,
                disk_name=disk.name,
                relative_path=relative,
                file_name=path.name,
                size=size,
                mtime=mtime,
                entry_type=entry_type,
                last_seen_mount_point=mount_text,
                indexed_at=datetime.now(timezone.utc),
                hash=file_hash,
                solid_flag=False,
                status=EntryStatus.NORMAL,
            )
        )
        report._count(entry_type, relative in existing_paths)

    return seen


def full_scan(
    disk: Disk,
    mount_point: str | os.PathLike[str],
    entry_repo: EntryStore,
    disk_repo: DiskStore,
    compute_hash: bool = False,
) -> ScanReport:
    """Index the whole disk, mark vanished entries missing and record the mount point."""
    report = ScanReport()
    progress = ScanProgress.spinner()

    existing_entries = entry_repo.get_entries_by_disk(disk.disk_id)
    existing_paths = {entry.relative_path for entry in existing_entries}

    seen = _index_tree(
        disk, mount_point, mount_point, entry_repo, compute_hash,
        progress, report, existing_paths, lenient=False,
    )

    for existing in existing_entries:
        if existing.relative_path not in seen:
            entry_repo.mark_missing(disk.disk_id, existing.relative_path)
            report.files_marked_missing += 1

    disk_repo.update_last_mount_point(disk.disk_id, os.fspath(mount_point))
    progress.finish()
    return report


def scan_path(
    disk: Disk,
    mount_point: str | os.PathLike[str],
    target_path: str | os.PathLike[str],
    entry_repo: EntryStore,
    compute_hash: bool = False,
) -> ScanReport:
    """Index one path below the mount point, such as newly stored files."""
    report = ScanReport()
    existing_paths = {
        entry.relative_path for entry in entry_repo.get_entries_by_disk(disk.disk_id)
    }

    progress = ScanProgress.spinner()
    progress.set_message(f"Indexing {os.fspath(target_path)}...")

    _index_tree(
        disk, mount_point, target_path, entry_repo, compute_hash,
        progress, report, existing_paths, lenient=True,
    )

    progress.finish()
    return report