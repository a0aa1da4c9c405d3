from datetime import datetime, timezone

from disco.disk import DiskId
from disco.entry import EntryType, IndexEntry
from disco.query import SearchOptions, calculate_score, search

_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _entry(relative_path: str, size: int = 10, entry_type: EntryType = EntryType.FILE) -> IndexEntry:
    return IndexEntry(
        entry_id=0,
        disk_id=DiskId("disk-1"),
        disk_name="Disk One",
        relative_path=relative_path,
        file_name=relative_path.rsplit("/", 1)[-1],
        size=size,
        mtime=_NOW,
        entry_type=entry_type,
        last_seen_mount_point="/mnt/one",
        indexed_at=_NOW,
    )


class _FakeRepo:
    def __init__(self, entries: list[IndexEntry]) -> None:
        self.entries = entries
        self.calls: list[tuple[str, int]] = []

    def search_by_name(self, keyword: str, limit: int) -> list[IndexEntry]:
        self.calls.append((keyword, limit))
        return self.entries[:limit]


def test_calculate_score_file_name_match() -> None:
    assert calculate_score("test", "test", "test") == 1000
    assert calculate_score("test_file.txt", "test_file.txt", "test") == 800
    assert calculate_score("my_test_file.txt", "my_test_file.txt", "test") >= 500


def test_calculate_score_folder_name_match() -> None:
    assert calculate_score("B.txt", "A/B.txt", "A") == 600
    assert calculate_score("file.txt", "myfolder/sub/file.txt", "myfolder") >= 300
    assert calculate_score("D.txt", "A/C/D.txt", "A") >= 300


def test_calculate_score_no_match() -> None:
    assert calculate_score("file.txt", "other/path.txt", "xyz") == 0


def test_calculate_score_is_case_insensitive() -> None:
    assert calculate_score("TEST", "TEST", "test") == 1000


def test_calculate_score_earlier_position_scores_higher() -> None:
    early = calculate_score("a_test.txt", "a_test.txt", "test")
    late = calculate_score("abcdef_test.txt", "abcdef_test.txt", "test")
    assert 500 < late < early < 800


def test_search_asks_repo_for_twice_the_limit() -> None:
    repo = _FakeRepo([_entry("report.txt")])
    search(repo, "report", SearchOptions(limit=7))
    assert repo.calls == [("report", 14)]


def test_search_orders_by_score() -> None:
    repo = _FakeRepo([
        _entry("my_report.txt"),
        _entry("report"),
        _entry("report_2024.txt"),
    ])
    results = search(repo, "report", SearchOptions())
    assert [r.entry.file_name for r in results] == ["report", "report_2024.txt", "my_report.txt"]
    assert [r.score for r in results][:2] == [1000, 800]


def test_search_filters_by_extension_and_size() -> None:
    repo = _FakeRepo([
        _entry("photo.jpg", size=500),
        _entry("photo.png", size=500),
        _entry("photo_small.jpg", size=5),
    ])
    results = search(repo, "photo", SearchOptions(ext=".jpg", min_size=100))
    assert [r.entry.file_name for r in results] == ["photo.jpg"]


def test_search_filters_by_max_size_and_type() -> None:
    repo = _FakeRepo([
        _entry("music", size=0, entry_type=EntryType.DIR),
        _entry("music.mp3", size=9000),
        _entry("music_clip.mp3", size=50),
    ])
    results = search(repo, "music", SearchOptions(max_size=100, entry_type=EntryType.FILE))
    assert [r.entry.file_name for r in results] == ["music_clip.mp3"]


def test_search_drops_unscored_and_truncates() -> None:
    repo = _FakeRepo([_entry("unrelated.txt")] + [_entry(f"log{n}.txt") for n in range(5)])
    results = search(repo, "log", SearchOptions(limit=3))
    assert len(results) == 3
    assert all(r.entry.file_name.startswith("log") for r in results)


def test_search_matches_folder_in_path() -> None:
    repo = _FakeRepo([_entry("Projects/notes.txt")])
    results = search(repo, "projects", SearchOptions())
    assert [(r.entry.relative_path, r.score) for r in results] == [("Projects/notes.txt", 600)]