from pathlib import Path

import pytest

from disco.hasher import Blake3, blake3_hex, hash_file, hash_files_in_dir


def test_hash_file(tmp_path):
    path = tmp_path / "temp.bin"
    path.write_bytes(b"hello world")
    digest = hash_file(path)
    assert len(digest) == 64
    assert digest != ""


def test_hash_consistency(tmp_path):
    path = tmp_path / "temp.bin"
    path.write_bytes(b"test content")
    first = hash_file(path)
    second = hash_file(path)
    assert first == second
    assert first == blake3_hex(b"test content")
    assert len(first) == 64


def test_empty_input_known_digest():
    assert blake3_hex(b"") == (
        "af1349b9f5f9a1a6a0404dea36dcc9499bcb25c9adc112b7cc9a93cae41f3262"
    )


def test_abc_known_digest():
    assert blake3_hex(b"abc") == (
        "6437b3ac38465133ffb63b75273a8db548c558465d79db03fd359c6cd5bd9d85"
    )


@pytest.mark.parametrize("split", [0, 1, 63, 64, 65, 1023, 1024, 1025, 3000, 4999])
def test_incremental_matches_one_shot(split):
    data = bytes(i % 251 for i in range(5000))
    hasher = Blake3()
    hasher.update(data[:split])
    hasher.update(data[split:])
    assert hasher.hexdigest() == blake3_hex(data)


def test_chunk_boundary_lengths_differ():
    digests = {blake3_hex(b"\x00" * n) for n in (1023, 1024, 1025, 2048, 2049)}
    assert len(digests) == 5


def test_digest_does_not_consume_state():
    hasher = Blake3(b"part one")
    first = hasher.digest()
    assert hasher.digest() == first
    hasher.update(b" and two")
    assert hasher.hexdigest() == blake3_hex(b"part one and two")


def test_hash_file_matches_bytes_digest_for_large_file(tmp_path):
    data = bytes(i % 251 for i in range(70 * 1024))
    path = tmp_path / "big.bin"
    path.write_bytes(data)
    assert hash_file(path) == blake3_hex(data)


def test_hash_file_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        hash_file(tmp_path / "absent.bin")


def test_hash_files_in_dir_reports_each_file(tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "a.txt").write_bytes(b"a")
    (tmp_path / "sub" / "b.txt").write_bytes(b"bb")
    seen = []
    result = hash_files_in_dir(tmp_path, lambda p, size: seen.append((Path(p).name, size)))
    assert sorted(seen) == [("a.txt", 1), ("b.txt", 2)]
    assert result == {
        tmp_path / "a.txt": blake3_hex(b"a"),
        tmp_path / "sub" / "b.txt": blake3_hex(b"bb"),
    }