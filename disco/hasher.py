"""BLAKE3 hashing of byte strings, files and directory trees."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Sequence

HASH_CHUNK_SIZE = 64 * 1024

_MASK = 0xFFFFFFFF
_IV = (
    0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19,
)
_PERMUTATION = (2, 6, 3, 10, 7, 0, 4, 13, 1, 11, 12, 5, 9, 14, 15, 8)

_CHUNK_START = 1 << 0
_CHUNK_END = 1 << 1
_PARENT = 1 << 2
_ROOT = 1 << 3

_BLOCK_LEN = 64
_CHUNK_LEN = 1024
_OUT_LEN = 32


def _g(s: list[int], a: int, b: int, c: int, d: int, mx: int, my: int) -> None:
    s[a] = (s[a] + s[b] + mx) & _MASK
    x = s[d] ^ s[a]
    s[d] = ((x >> 16) | (x << 16)) & _MASK
    s[c] = (s[c] + s[d]) & _MASK
    x = s[b] ^ s[c]
    s[b] = ((x >> 12) | (x << 20)) & _MASK
    s[a] = (s[a] + s[b] + my) & _MASK
    x = s[d] ^ s[a]
    s[d] = ((x >> 8) | (x << 24)) & _MASK
    s[c] = (s[c] + s[d]) & _MASK
    x = s[b] ^ s[c]
    s[b] = ((x >> 7) | (x << 25)) & _MASK


def _compress(
    cv: Sequence[int], block: Sequence[int], counter: int, block_len: int, flags: int
) -> list[int]:
    s = [*cv, *_IV[:4], counter & _MASK, (counter >> 32) & _MASK, block_len, flags]
    m = list(block)
    for round_no in range(7):
        _g(s, 0, 4, 8, 12, m[0], m[1])
        _g(s, 1, 5, 9, 13, m[2], m[3])
        _g(s, 2, 6, 10, 14, m[4], m[5])
        _g(s, 3, 7, 11, 15, m[6], m[7])
        _g(s, 0, 5, 10, 15, m[8], m[9])
        _g(s, 1, 6, 11, 12, m[10], m[11])
        _g(s, 2, 7, 8, 13, m[12], m[13])
        _g(s, 3, 4, 9, 14, m[14], m[15])
        if round_no < 6:
            m = [m[i] for i in _PERMUTATION]
    low, high = s[:8], s[8:]
    return [x ^ y for x, y in zip(low, high)] + [y ^ c for y, c in zip(high, cv)]


def _block_words(block: bytes) -> tuple[int, ...]:
    return struct.unpack("<16I", block.ljust(_BLOCK_LEN, b"\0"))


@dataclass(frozen=True)
class _Output:
    input_cv: tuple[int, ...]
    block_words: tuple[int, ...]
    counter: int
    block_len: int
    flags: int

    def chaining_value(self) -> tuple[int, ...]:
        return tuple(
            _compress(self.input_cv, self.block_words, self.counter, self.block_len, self.flags)[:8]
        )

    def root_bytes(self) -> bytes:
        words = _compress(
            self.input_cv, self.block_words, 0, self.block_len, self.flags | _ROOT
        )
        return struct.pack("<8I", *words[:8])[:_OUT_LEN]


def _parent_output(left: Sequence[int], right: Sequence[int], key: tuple[int, ...]) -> _Output:
    return _Output(key, (*left, *right), 0, _BLOCK_LEN, _PARENT)


class _ChunkState:
    def __init__(self, key: tuple[int, ...], chunk_counter: int) -> None:
        self.cv: tuple[int, ...] = key
        self.chunk_counter = chunk_counter
        self.block = bytearray()
        self.blocks_compressed = 0

    def __len__(self) -> int:
        return _BLOCK_LEN * self.blocks_compressed + len(self.block)

    def _start_flag(self) -> int:
        return _CHUNK_START if self.blocks_compressed == 0 else 0

    def update(self, data: memoryview) -> None:
        while data:
            if len(self.block) == _BLOCK_LEN:
                self.cv = tuple(
                    _compress(
                        self.cv,
                        _block_words(bytes(self.block)),
                        self.chunk_counter,
                        _BLOCK_LEN,
                        self._start_flag(),
                    )[:8]
                )
                self.blocks_compressed += 1
                self.block.clear()
            take = min(_BLOCK_LEN - len(self.block), len(data))
            self.block += data[:take]
            data = data[take:]

    def output(self) -> _Output:
        return _Output(
            self.cv,
            _block_words(bytes(self.block)),
            self.chunk_counter,
            len(self.block),
            self._start_flag() | _CHUNK_END,
        )


class Blake3:
    """Incremental BLAKE3 hasher producing 32-byte digests."""

    def __init__(self, data: bytes = b"") -> None:
        self._key: tuple[int, ...] = _IV
        self._chunk = _ChunkState(self._key, 0)
        self._cv_stack: list[tuple[int, ...]] = []
        if data:
            self.update(data)

    def _push_chunk_cv(self, cv: tuple[int, ...], total_chunks: int) -> None:
        while total_chunks & 1 == 0:
            cv = _parent_output(self._cv_stack.pop(), cv, self._key).chaining_value()
            total_chunks >>= 1
        self._cv_stack.append(cv)

    def update(self, data: bytes) -> None:
        """Feed more bytes into the hash."""
        view = memoryview(data).cast("B")
        while view:
            if len(self._chunk) == _CHUNK_LEN:
                chunk_cv = self._chunk.output().chaining_value()
                total_chunks = self._chunk.chunk_counter + 1
                self._push_chunk_cv(chunk_cv, total_chunks)
                self._chunk = _ChunkState(self._key, total_chunks)
            take = min(_CHUNK_LEN - len(self._chunk), len(view))
            self._chunk.update(view[:take])
            view = view[take:]

    def digest(self) -> bytes:
        """Return the 32-byte digest of everything fed so far."""
        output = self._chunk.output()
        for cv in reversed(self._cv_stack):
            output = _parent_output(cv, output.chaining_value(), self._key)
        return output.root_bytes()

    def hexdigest(self) -> str:
        """Return the digest as 64 lower-case hex characters."""
        return self.digest().hex()


def blake3_hex(data: bytes) -> str:
    """Hex BLAKE3 digest of a byte string."""
    return Blake3(data).hexdigest()


def hash_file(path: str | os.PathLike[str]) -> str:
    """Hex BLAKE3 digest of a file's content, read in 64 KiB pieces."""
    hasher = Blake3()
    with open(path, "rb") as handle:
        while piece := handle.read(HASH_CHUNK_SIZE):
            hasher.update(piece)
    return hasher.hexdigest()


def _walk_files(root: Path) -> Iterator[Path]:
    if root.is_file():
        yield root
        return
    for dirpath, _dirnames, filenames in os.walk(root):
        for name in filenames:
            candidate = Path(dirpath) / name
            if candidate.is_file():
                yield candidate


def hash_files_in_dir(
    directory: str | os.PathLike[str],
    progress_cb: Callable[[Path, int], None],
) -> dict[Path, str]:
    """Hash every file under a directory, reporting each path and size first."""
    hashes: dict[Path, str] = {}
    for path in _walk_files(Path(directory)):
        progress_cb(path, path.stat().st_size)
        hashes[path] = hash_file(path)
    return hashes