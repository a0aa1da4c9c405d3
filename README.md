# disco

Building blocks for keeping track of files spread over many local disks.
Everything is pure Python with no third-party dependencies.

## Modules

- `disco.disk`: `DiskId`, `DiskIdentity`, `Disk` and `MountStatus`.
  `DiskIdentity.matches` recognises a disk by serial number, then volume UUID,
  then volume label together with exact capacity.
  `DiskIdentity.matches_with_tolerance` returns a `MatchResult` whose `kind`
  is a `MatchKind` (`EXACT`, `TOLERANT`, `WEAK`, `NONE`), with `is_match()`,
  `confidence()` (1.0, 0.8, 0.5, 0.0) and a `reason` string that explains a
  mismatch. `DiskIdentity.generate_fingerprint` hashes label, capacity and
  registration time. `format_capacity` formats byte counts with two decimals.
- `disco.entry`: `IndexEntry` with `full_path`, `matches_keyword` and
  `extension`, plus the `EntryType` and `EntryStatus` enums.
- `disco.solid`: `SolidLayerDepth.parse` accepts `0`, `1`, `2`, larger numbers,
  `inf` and `infinite`; `min_depth` and `can_split_at` follow from it.
  `AtomicUnit` describes a unit that must stay on one disk.
- `disco.plan`: `PlanItem` and `StorePlan` (`from_items`, `with_dedup`,
  `is_empty`, `items_for_disk`, `space_per_disk`).
- `disco.task`: `Task` (`create`, `start`, `complete`, `fail`, `interrupt`,
  `is_resumable`), `TaskType`, `TaskStatus`, `StoreTaskPayload` and
  `ScanTaskPayload`.
- `disco.hasher`: a pure-Python BLAKE3 (`Blake3`, `blake3_hex`), plus
  `hash_file` and `hash_files_in_dir`.
- `disco.filecopy`: `copy_file` and `copy_dir_recursive`, each with an
  optional `progress_cb(copied, total)`.
- `disco.verify`: `verify_copy` and `verify_dir_copy`, which raise
  `TaskFailedError` on a hash mismatch or a missing destination file.
- `disco.query`: `calculate_score`, and `search` with `SearchOptions`
  (size, extension and entry-type filters, limit 50 by default) returning
  `SearchResult`s best first.
- `disco.scanner`: `full_scan` and `scan_path` walk a mounted disk and upsert
  `IndexEntry` records into an entry repository; `full_scan` also marks
  vanished entries missing. `ScanProgress` draws progress on stderr and
  `ScanReport` counts what was added, updated and marked missing.
- `disco.i18n`: language selection between English and Simplified Chinese
  (`set_language`, `current_language`, `get_language_name`, `normalize_lang`,
  `init`, `detect_system_lang`).
- `disco.selection`: `run_interruptible_search` and
  `run_interruptible_search_unlimited` search entries and then folder names,
  stopping early when Ctrl+B is pressed on a terminal;
  `parse_selection` turns input such as `1,3,5` or `all` into zero-based
  indices; `format_size` formats sizes with one decimal.

## Install

```
pip install .
pip install ".[test]"   # with pytest
```

## Example

```python
from disco.disk import DiskIdentity

registered = DiskIdentity(volume_label="Media", capacity_bytes=1_000_000)
seen = DiskIdentity(volume_label="Media", capacity_bytes=1_020_000)

result = registered.matches_with_tolerance(seen)
print(result.is_match(), result.confidence(), result.reason)
```

```python
from disco.filecopy import copy_file
from disco.hasher import hash_file
from disco.verify import verify_copy

copy_file("a.bin", "backup/a.bin")
verify_copy("a.bin", "backup/a.bin")
print(hash_file("a.bin"))
```

## What this package does not do

- It has no command-line program, interactive shell or menu; it is a library.
- It has no storage of its own. `search`, `full_scan`, `scan_path` and the
  interruptible search take repository objects that you provide, with methods
  such as `search_by_name`, `search_folder_names`, `get_entries_by_disk`,
  `upsert_entry`, `mark_missing` and `update_last_mount_point`.
- It does not detect mounted disks or read their serial numbers or UUIDs.
- `disco.i18n` only chooses a language; it holds no translated messages.

## Tests

```
pytest
```