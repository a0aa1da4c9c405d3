from pathlib import Path

import pytest

from disco.verify import TaskFailedError, verify_copy, verify_dir_copy


def test_verify_matching_files(tmp_path: Path) -> None:
    file1 = tmp_path / "a.txt"
    file2 = tmp_path / "b.txt"
    file1.write_bytes(b"same content")
    file2.write_bytes(b"same content")

    assert verify_copy(file1, file2) is None


def test_verify_different_files(tmp_path: Path) -> None:
    file1 = tmp_path / "a.txt"
    file2 = tmp_path / "b.txt"
    file1.write_bytes(b"content a")
    file2.write_bytes(b"content b")

    with pytest.raises(TaskFailedError, match="Hash mismatch"):
        verify_copy(file1, file2)


def _make_tree(root: Path) -> None:
    (root / "sub").mkdir(parents=True)
    (root / "x.txt").write_bytes(b"x data")
    (root / "sub" / "y.txt").write_bytes(b"y data")


def test_verify_dir_copy_counts_files(tmp_path: Path) -> None:
    _make_tree(tmp_path / "src")
    _make_tree(tmp_path / "dst")

    assert verify_dir_copy(tmp_path / "src", tmp_path / "dst") == 2


def test_verify_dir_copy_missing_file(tmp_path: Path) -> None:
    _make_tree(tmp_path / "src")
    _make_tree(tmp_path / "dst")
    (tmp_path / "dst" / "sub" / "y.txt").unlink()

    with pytest.raises(TaskFailedError, match="Missing destination file"):
        verify_dir_copy(tmp_path / "src", tmp_path / "dst")


def test_verify_dir_copy_changed_file(tmp_path: Path) -> None:
    _make_tree(tmp_path / "src")
    _make_tree(tmp_path / "dst")
    (tmp_path / "dst" / "x.txt").write_bytes(b"tampered")

    with pytest.raises(TaskFailedError, match="Hash mismatch"):
        verify_dir_copy(tmp_path / "src", tmp_path / "dst")


def test_verify_missing_source_file_raises(tmp_path: Path) -> None:
    other = tmp_path / "b.txt"
    other.write_bytes(b"data")

    with pytest.raises(FileNotFoundError):
        verify_copy(tmp_path / "absent.txt", other)