"""Disk identity, matching and registration records."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from datetime import datetime, timezone

from disco.hasher import Blake3


@dataclass(frozen=True)
class DiskId:
    """Unique identifier for a disk."""

    value: str

    def __str__(self) -> str:
        return self.value


class MatchKind(enum.Enum):
    EXACT = "exact"
    TOLERANT = "tolerant"
    WEAK = "weak"
    NONE = "none"


_CONFIDENCE = {
    MatchKind.EXACT: 1.0,
    MatchKind.TOLERANT: 0.8,
    MatchKind.WEAK: 0.5,
    MatchKind.NONE: 0.0,
}


@dataclass(frozen=True)
class MatchResult:
    """Outcome of comparing two identities, with a human-readable reason."""

    kind: MatchKind
    reason: str

    def is_match(self) -> bool:
        return self.kind is not MatchKind.NONE

    def confidence(self) -> float:
        return _CONFIDENCE[self.kind]


def format_capacity(num_bytes: int) -> str:
    """Format a byte count with two decimals, as used in diagnostics."""
    for unit, factor in (("TB", 1024**4), ("GB", 1024**3), ("MB", 1024**2), ("KB", 1024)):
        if num_bytes >= factor:
            return f"{num_bytes / factor:.2f} {unit}"
    return f"{num_bytes} B"


def _within(base: int, value: int, tolerance: float) -> bool:
    return base * (1.0 - tolerance) <= value <= base * (1.0 + tolerance)


def _labels_similar(l1: str, l2: str) -> bool:
    a, b = l1.lower(), l2.lower()
    if a == b or a in b or b in a:
        return True
    min_len = min(len(a.encode()), len(b.encode()))
    if min_len >= 3:
        matching = sum(x == y for x, y in zip(a[:min_len], b[:min_len]))
        if matching / min_len >= 0.7:
            return True
    return False


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    micros = moment.microsecond
    if micros:
        text += f".{micros // 1000:03d}" if micros % 1000 == 0 else f".{micros:06d}"
    return text + "+00:00"


@dataclass
class DiskIdentity:
    """Physical identity information used to recognise a disk."""

    serial: str | None = None
    volume_uuid: str | None = None
    volume_label: str | None = None
    capacity_bytes: int = 0
    fingerprint: str = ""

    def matches(self, other: DiskIdentity) -> bool:
        """Match by serial, then volume UUID, then label plus capacity."""
        if self.serial is not None and other.serial is not None and self.serial == other.serial:
            return True
        if (
            self.volume_uuid is not None
            and other.volume_uuid is not None
            and self.volume_uuid == other.volume_uuid
        ):
            return True
        return (
            self.volume_label is not None
            and self.volume_label == other.volume_label
            and self.capacity_bytes == other.capacity_bytes
        )

    def matches_with_tolerance(self, other: DiskIdentity) -> MatchResult:
        """Match allowing small capacity and label differences."""
        if self.serial is not None and other.serial is not None and self.serial == other.serial:
            return MatchResult(MatchKind.EXACT, "Serial number match")
        if (
            self.volume_uuid is not None
            and other.volume_uuid is not None
            and self.volume_uuid == other.volume_uuid
        ):
            return MatchResult(MatchKind.EXACT, "Volume UUID match")

        l1, l2 = self.volume_label, other.volume_label
        if l1 is not None and l2 is not None:
            if l1 == l2 and _within(self.capacity_bytes, other.capacity_bytes, 0.05):
                return MatchResult(
                    MatchKind.TOLERANT,
                    f"Volume label '{l1}' match with capacity tolerance "
                    f"({format_capacity(self.capacity_bytes)} vs "
                    f"{format_capacity(other.capacity_bytes)})",
                )
            if _labels_similar(l1, l2) and _within(
                self.capacity_bytes, other.capacity_bytes, 0.10
            ):
                return MatchResult(
                    MatchKind.WEAK,
                    f"Similar labels '{l1}'/'{l2}' with matching capacity",
                )

        return MatchResult(MatchKind.NONE, self._diagnose_mismatch(other))

    def _diagnose_mismatch(self, other: DiskIdentity) -> str:
        reasons: list[str] = []

        if self.serial is not None and other.serial is not None:
            if self.serial != other.serial:
                reasons.append(f"Serial differs: '{self.serial}' vs '{other.serial}'")
        elif self.serial is not None:
            reasons.append("Registered serial not detected on mount")
        elif other.serial is not None:
            reasons.append("New serial detected on mount")

        if (
            self.volume_uuid is not None
            and other.volume_uuid is not None
            and self.volume_uuid != other.volume_uuid
        ):
            reasons.append(f"UUID differs: '{self.volume_uuid}' vs '{other.volume_uuid}'")

        if self.volume_label != other.volume_label:
            reasons.append(
                f"Label differs: '{self.volume_label or 'none'}' "
                f"vs '{other.volume_label or 'none'}'"
            )

        if self.capacity_bytes != other.capacity_bytes:
            reasons.append(
                f"Capacity differs: {format_capacity(self.capacity_bytes)} "
                f"vs {format_capacity(other.capacity_bytes)}"
            )

        return "; ".join(reasons) if reasons else "No matching attributes found"

    @staticmethod
    def generate_fingerprint(
        label: str | None, capacity: int, registered_at: datetime
    ) -> str:
        """Hash of label, capacity and registration time, as 64 hex characters."""
        hasher = Blake3()
        hasher.update((label or "").encode())
        hasher.update(struct.pack("<Q", capacity))
        hasher.update(_rfc3339(registered_at).encode())
        return hasher.hexdigest()


class MountStatus(enum.Enum):
    CONNECTED = "Connected"
    OFFLINE = "Offline"
    IDENTITY_CONFLICT = "Identity Conflict"

    def __str__(self) -> str:
        return self.value


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Disk:
    """A registered disk."""

    disk_id: DiskId
    name: str
    identity: DiskIdentity
    first_registered: datetime = field(default_factory=_utc_now)
    last_mount_point: str | None = None
    mount_status: MountStatus = MountStatus.OFFLINE
    current_mount_point: str | None = None