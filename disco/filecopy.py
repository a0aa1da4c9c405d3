"""File and directory copying with progress reporting."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterator, Optional

COPY_CHUNK_SIZE = 64 * 1024

ProgressCallback = Callable[[int, int], None]


def copy_file(
    source: str | os.PathLike[str],
    dest: str | os.PathLike[str],
    progress_cb: Optional[ProgressCallback] = None,
) -> None:
    """Copy one file, calling ``progress_cb(copied, total)`` after each piece."""
    source, dest = Path(source), Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)

    total = source.stat().st_size
    copied = 0
    with open(source, "rb") as reader, open(dest, "wb") as writer:
        while piece := reader.read(COPY_CHUNK_SIZE):
            writer.write(piece)
            copied += len(piece)
            if progress_cb is not None:
                progress_cb(copied, total)


def _walk(root: Path) -> Iterator[tuple[Path, bool, bool]]:
    """Yield (path, is_dir, is_file) for root and everything below, parents first.

    Symbolic links are reported as neither directories nor files and are not
    followed; unreadable entries are skipped.
    """
    try:
        is_link = root.is_symlink()
        is_dir = not is_link and root.is_dir()
        is_file = not is_link and root.is_file()
    except OSError:
        return
    if not (is_link or root.exists()):
        return
    yield root, is_dir, is_file
    if not is_dir:
        return

    stack = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError:
            continue
        subdirs = []
        for entry in entries:
            try:
                entry_is_dir = entry.is_dir(follow_symlinks=False)
                entry_is_file = entry.is_file(follow_symlinks=False)
            except OSError:
                continue
            path = Path(entry.path)
            yield path, entry_is_dir, entry_is_file
            if entry_is_dir:
                subdirs.append(path)
        stack.extend(reversed(subdirs))


def _file_size(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError:
        return 0


def copy_dir_recursive(
    source: str | os.PathLike[str],
    dest: str | os.PathLike[str],
    progress_cb: Optional[ProgressCallback] = None,
) -> int:
    """Copy a directory tree and return the number of bytes copied.

    ``progress_cb(copied, total)`` is called after each file.
    """
    source, dest = Path(source), Path(dest)

    total_size = sum(_file_size(path) for path, _, is_file in _walk(source) if is_file)

    dest.mkdir(parents=True, exist_ok=True)

    total_copied = 0
    for path, is_dir, is_file in _walk(source):
        relative = path.relative_to(source)
        dest_path = dest / relative
        if is_dir:
            dest_path.mkdir(parents=True, exist_ok=True)
        elif is_file:
            file_size = path.stat().st_size
            copy_file(path, dest_path)
            total_copied += file_size
            if progress_cb is not None:
                progress_cb(total_copied, total_size)

    return total_copied