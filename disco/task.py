"""Task state machine used to resume interrupted work."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone


class TaskType(enum.Enum):
    STORE = "store"
    SCAN = "scan"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def _missing_(cls, value: object) -> TaskType:
        raise ValueError(f"Invalid task type: {value}")


class TaskStatus(enum.Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    INTERRUPTED = "interrupted"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def _missing_(cls, value: object) -> TaskStatus:
        raise ValueError(f"Invalid task status: {value}")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Task:
    """A persisted task with a JSON-encoded payload."""

    task_id: str
    task_type: TaskType
    status: TaskStatus
    payload: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(cls, task_id: str, task_type: TaskType, payload: str) -> Task:
        """A new pending task stamped with the current time."""
        now = _utc_now()
        return cls(task_id, task_type, TaskStatus.PENDING, payload, now, now)

    def _move_to(self, status: TaskStatus) -> None:
        self.status = status
        self.updated_at = _utc_now()

    def start(self) -> None:
        self._move_to(TaskStatus.RUNNING)

    def complete(self) -> None:
        self._move_to(TaskStatus.COMPLETED)

    def fail(self) -> None:
        self._move_to(TaskStatus.FAILED)

    def interrupt(self) -> None:
        self._move_to(TaskStatus.INTERRUPTED)

    def is_resumable(self) -> bool:
        return self.status in (TaskStatus.INTERRUPTED, TaskStatus.PENDING)


@dataclass
class StoreTaskPayload:
    """Progress of a store task."""

    source_path: str
    target_disk_id: str
    target_relative_path: str
    total_files: int
    completed_files: list[str] = field(default_factory=list)


@dataclass
class ScanTaskPayload:
    """Progress of a scan task."""

    disk_id: str
    scanned_count: int = 0
    is_full_scan: bool = False