"""Keyword search over indexed entries with simple scoring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from disco.entry import EntryType, IndexEntry


class EntrySearcher(Protocol):
    def search_by_name(self, keyword: str, limit: int) -> list[IndexEntry]: ...


@dataclass
class SearchOptions:
    """Filters and limit applied to a search."""

    min_size: Optional[int] = None
    max_size: Optional[int] = None
    ext: Optional[str] = None
    entry_type: Optional[EntryType] = None
    limit: int = 50


@dataclass
class SearchResult:
    """An entry together with its match score."""

    entry: IndexEntry
    score: int


def _byte_pos(text: str, needle: str) -> int:
    index = text.find(needle)
    return len(text[:index].encode()) if index > 0 else 0


def calculate_score(file_name: str, relative_path: str, keyword: str) -> int:
    """Score how well a keyword matches an entry's name or its path; 0 is no match."""
    file_lower = file_name.lower()
    path_lower = relative_path.lower()
    keyword_lower = keyword.lower()

    if file_lower == keyword_lower:
        return 1000
    if file_lower.startswith(keyword_lower):
        return 800
    if keyword_lower in file_lower:
        pos = _byte_pos(file_lower, keyword_lower)
        return 500 + (100 - min(pos, 100))

    if keyword_lower in path_lower:
        for depth, segment in enumerate(path_lower.split("/")):
            if keyword_lower not in segment:
                continue
            if segment == keyword_lower:
                return 600
            if segment.startswith(keyword_lower):
                return 450 + (100 - min(depth, 100))
            pos = _byte_pos(segment, keyword_lower)
            return 300 + (50 - min(pos, 50)) + (20 - min(depth, 20))

    return 0


def _passes_filters(entry: IndexEntry, options: SearchOptions) -> bool:
    if options.min_size is not None and entry.size < options.min_size:
        return False
    if options.max_size is not None and entry.size > options.max_size:
        return False
    if options.ext is not None and entry.extension() != options.ext.lstrip("."):
        return False
    if options.entry_type is not None and entry.entry_type is not options.entry_type:
        return False
    return True


def search(
    repo: EntrySearcher, keyword: str, options: Optional[SearchOptions] = None
) -> list[SearchResult]:
    """Search the repository, filter, score and return the best matches first."""
    options = options or SearchOptions()
    candidates = repo.search_by_name(keyword, options.limit * 2)

    scored = [
        SearchResult(entry, score)
        for entry in candidates
        if _passes_filters(entry, options)
        and (score := calculate_score(entry.file_name, entry.relative_path, keyword)) > 0
    ]
    scored.sort(key=lambda result: -result.score)
    return scored[: options.limit]