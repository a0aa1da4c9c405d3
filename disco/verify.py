"""Hash verification of copied files and directories."""

from __future__ import annotations

import os
from pathlib import Path

from disco.filecopy import _walk
from disco.hasher import hash_file


class TaskFailedError(Exception):
    """A copy task failed verification."""


def verify_copy(source: str | os.PathLike[str], dest: str | os.PathLike[str]) -> None:
    """Raise TaskFailedError unless both files have the same BLAKE3 hash."""
    source_hash = hash_file(source)
    dest_hash = hash_file(dest)
    if source_hash != dest_hash:
        raise TaskFailedError(f"Hash mismatch: source={source_hash}, dest={dest_hash}")


def verify_dir_copy(source: str | os.PathLike[str], dest: str | os.PathLike[str]) -> int:
    """Verify every file under source against dest; return how many were checked."""
    source, dest = Path(source), Path(dest)
    verified = 0
    for path, _is_dir, is_file in _walk(source):
        if not is_file:
            continue
        dest_path = dest / path.relative_to(source)
        if not dest_path.exists():
            raise TaskFailedError(f"Missing destination file: {dest_path}")
        verify_copy(path, dest_path)
        verified += 1
    return verified