"""Interruptible keyword search and selection of results by number."""

from __future__ import annotations

import os
import re
import select
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Protocol, TextIO

from disco.entry import IndexEntry

DEFAULT_SEARCH_LIMIT = 10000

_CTRL_B = "\x02"
_POLL_SECONDS = 0.1
_NUMBER = re.compile(r"\+?[0-9]+")


class FolderSearcher(Protocol):
    def search_by_name(self, keyword: str, limit: int) -> list[IndexEntry]: ...

    def search_folder_names(self, keyword: str, limit: int) -> list[Any]: ...


@dataclass
class InterruptibleSearchResult:
    """Entries and folder matches found, and whether the user cut the search short."""

    entries: list[IndexEntry] = field(default_factory=list)
    folder_matches: list[Any] = field(default_factory=list)
    was_interrupted: bool = False


def format_size(size: int) -> str:
    """Format a byte count with one decimal."""
    for unit, factor in (("GB", 1024**3), ("MB", 1024**2), ("KB", 1024)):
        if size >= factor:
            return f"{size / factor:.1f} {unit}"
    return f"{size} B"


def parse_selection(text: str, total_items: int) -> list[int]:
    """Turn '1,3,5' or 'all' into zero-based indices below total_items.

    Items that are not numbers or fall outside 1..total_items are ignored.
    """
    text = text.strip()
    if text.lower() == "all":
        return list(range(total_items))
    indices: list[int] = []
    for part in text.split(","):
        part = part.strip()
        if not _NUMBER.fullmatch(part):
            continue
        number = int(part)
        if 0 < number <= total_items:
            indices.append(number - 1)
    return indices


class _Spinner:
    """One-line status message, drawn only on a terminal."""

    _FRAMES = "⠁⠂⠄⡀⢀⠠⠐⠈"

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._active = bool(getattr(stream, "isatty", lambda: False)())
        self._frame = 0

    def show(self, message: str) -> None:
        if not self._active:
            return
        frame = self._FRAMES[self._frame % len(self._FRAMES)]
        self._frame += 1
        self._stream.write(f"\r\x1b[2K{frame} {message}")
        self._stream.flush()

    def clear(self) -> None:
        if self._active:
            self._stream.write("\r\x1b[2K")
            self._stream.flush()


def _listen_posix(stop: threading.Event, interrupted: threading.Event) -> None:
    import termios
    import tty

    fd = sys.stdin.fileno()
    saved = termios.tcgetattr(fd)
    tty.setcbreak(fd)
    try:
        while not stop.is_set():
            ready, _, _ = select.select([fd], [], [], _POLL_SECONDS)
            if ready and os.read(fd, 1).decode(errors="ignore") == _CTRL_B:
                interrupted.set()
                return
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def _listen_windows(stop: threading.Event, interrupted: threading.Event) -> None:
    import msvcrt

    while not stop.wait(_POLL_SECONDS):
        while msvcrt.kbhit():
            if msvcrt.getwch() == _CTRL_B:
                interrupted.set()
                return


def _listen(stop: threading.Event, interrupted: threading.Event) -> None:
    try:
        if not sys.stdin or not sys.stdin.isatty():
            return
        if os.name == "nt":
            _listen_windows(stop, interrupted)
        else:
            _listen_posix(stop, interrupted)
    except (OSError, ImportError, ValueError):
        return


@contextmanager
def _ctrl_b_listener() -> Iterator[threading.Event]:
    """Watch the keyboard for Ctrl+B while the block runs; yield the interrupt flag."""
    interrupted = threading.Event()
    stop = threading.Event()
    listener = threading.Thread(target=_listen, args=(stop, interrupted), daemon=True)
    listener.start()
    try:
        yield interrupted
    finally:
        stop.set()
        listener.join()


def run_interruptible_search(
    entry_repo: FolderSearcher,
    keyword: str,
    entry_limit: int,
    folder_limit: int,
) -> InterruptibleSearchResult:
    """Search entries then folder names; Ctrl+B stops before the next step."""
    spinner = _Spinner(sys.stderr)
    spinner.show(f"Searching for '{keyword}'... (Ctrl+B to interrupt)")

    try:
        with _ctrl_b_listener() as interrupted:
            spinner.show(f"Searching entries for '{keyword}'...")
            entries: list[IndexEntry] = []
            if not interrupted.is_set():
                entries = entry_repo.search_by_name(keyword, entry_limit)

            spinner.show(f"Found {len(entries)} entries, searching folders...")
            folder_matches: list[Any] = []
            if not interrupted.is_set():
                folder_matches = entry_repo.search_folder_names(keyword, folder_limit)
    finally:
        spinner.clear()

    return InterruptibleSearchResult(
        entries=list(entries),
        folder_matches=list(folder_matches),
        was_interrupted=interrupted.is_set(),
    )


def run_interruptible_search_unlimited(
    entry_repo: FolderSearcher, keyword: str
) -> InterruptibleSearchResult:
    """Interruptible search with the default, generous limits."""
    return run_interruptible_search(
        entry_repo, keyword, DEFAULT_SEARCH_LIMIT, DEFAULT_SEARCH_LIMIT
    )