# src/day_planner/tasks/task_models.py

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from ..core.errors import ValidationError

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
_LOOSE_HHMM = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


class TaskStatus(StrEnum):
    """Live status of a task relative to the current time. Derived, never stored."""

    UPCOMING = "upcoming"
    CURRENT = "current"
    OVERDUE = "overdue"
    COMPLETED = "completed"


def parse_hhmm(raw: str | None, *, field_name: str = "time") -> tuple[int, int]:
    """Parse a zero-padded 24h "HH:MM" string into (hour, minute)."""
    m = _HHMM.match((raw or "").strip())
    if not m:
        raise ValidationError(f"{field_name} must be HH:MM (24h), got {raw!r}")
    return int(m.group(1)), int(m.group(2))


def normalize_hhmm(raw: Any) -> str:
    """
    Lenient reader for stored times: "7:05", "07:05" and "07:05:00" all become
    "07:05". Raises ValueError for anything else.
    """
    m = _LOOSE_HHMM.match(str(raw or "").strip())
    if not m:
        raise ValueError(f"bad time value: {raw!r}")
    hh, mm = int(m.group(1)), int(m.group(2))
    if hh > 23 or mm > 59:
        raise ValueError(f"bad time value: {raw!r}")
    return f"{hh:02d}:{mm:02d}"


def validate_window(name: str | None, start_time: str | None, end_time: str | None) -> None:
    """
    Shared input checks for tasks and templates:
    - name is non-empty after trimming
    - both times are present and well-formed
    - start_time < end_time (string compare == chronological for HH:MM)
    """
    if not name or not name.strip():
        raise ValidationError("Task name is required")
    if not start_time or not end_time:
        raise ValidationError("Start time and end time are required")
    parse_hhmm(start_time, field_name="start time")
    parse_hhmm(end_time, field_name="end time")
    if start_time >= end_time:
        raise ValidationError("End time must be after start time")


def _as_bool(raw: Any) -> bool:
    # Spreadsheet-backed APIs may hand booleans back as strings.
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    if isinstance(raw, (int, float)):
        return raw != 0
    return str(raw).strip().lower() in {"1", "true", "yes", "y", "on"}


def _as_datetime(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str) and raw.strip():
        s = raw.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(s)
        except ValueError:
            logger.debug("Unparseable createdAt=%r; using now", raw)
    return datetime.now()


@dataclass(slots=True)
class Task:
    id: str
    name: str
    start_time: str
    end_time: str
    description: str = ""
    completed: bool = False
    is_recurring: bool = False
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "description": self.description,
            "completed": self.completed,
            "isRecurring": self.is_recurring,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """
        Build a Task from its camelCase record.

        Raises KeyError/ValueError for records missing id, name or times;
        callers decide whether to skip or fail.
        """
        task_id = data["id"]
        name = str(data["name"] or "").strip()
        if task_id is None or str(task_id).strip() == "" or not name:
            raise ValueError(f"incomplete task record: {data!r}")
        start = normalize_hhmm(data["startTime"])
        end = normalize_hhmm(data["endTime"])
        return cls(
            id=str(task_id),
            name=name,
            start_time=start,
            end_time=end,
            description=str(data.get("description") or ""),
            completed=_as_bool(data.get("completed")),
            is_recurring=_as_bool(data.get("isRecurring")),
            created_at=_as_datetime(data.get("createdAt")),
        )


@dataclass(frozen=True, slots=True)
class RecurringTemplate:
    """Durable definition of a recurring task; `name` is its identity."""

    name: str
    start_time: str
    end_time: str
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecurringTemplate:
        return cls(
            name=str(data["name"]).strip(),
            start_time=normalize_hhmm(data["startTime"]),
            end_time=normalize_hhmm(data["endTime"]),
            description=str(data.get("description") or ""),
        )


@dataclass(frozen=True, slots=True)
class WriteResult:
    """Outcome of a store write: success flag plus an optional human-readable message."""

    ok: bool
    message: str | None = None

    @classmethod
    def success(cls, message: str | None = None) -> WriteResult:
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, message: str) -> WriteResult:
        return cls(ok=False, message=message)


def decode_tasks(records: Any) -> list[Task]:
    """Decode a list of task records, skipping malformed entries."""
    if not isinstance(records, list):
        raise ValueError(f"expected a list of tasks, got {type(records).__name__}")
    out: list[Task] = []
    for rec in records:
        if not isinstance(rec, dict):
            logger.warning("Skipping non-object task record: %r", rec)
            continue
        try:
            out.append(Task.from_dict(rec))
        except (KeyError, ValueError):
            logger.warning("Skipping malformed task record: %r", rec)
    return out
