# src/day_planner/storage/local_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from datetime import date
from pathlib import Path
from typing import Any

from ..core.errors import PersistenceError
from ..tasks.task_models import RecurringTemplate, Task, WriteResult, decode_tasks

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
TEMPLATES_KEY = "recurringTasks"
LAST_RESET_KEY = "lastResetDate"


class LocalStateStore:
    """
    SQLite key-value store of named records.

    Records (each independently readable/writable, absent on first run):
    - tasks: JSON list of task records
    - recurringTasks: JSON list of template records
    - lastResetDate: ISO date string

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "planner.sqlite3") -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
        except (OSError, sqlite3.Error) as exc:
            raise PersistenceError(f"Cannot open local store {self._db_path}: {exc}") from exc
        logger.info("LocalStateStore ready db=%s", self._db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS records (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- raw records ----

    def get_record(self, key: str) -> str | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM records WHERE key = ?", (key,)).fetchone()
                return None if row is None else str(row["value"])
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to read {key!r}: {exc}") from exc

    def set_record(self, key: str, value: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO records(key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                                   updated_at = excluded.updated_at
                    """,
                    (key, value, time.time()),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to write {key!r}: {exc}") from exc
        logger.debug("Record written key=%s bytes=%d", key, len(value))

    def _get_json(self, key: str) -> Any | None:
        raw = self.get_record(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise PersistenceError(f"Corrupt record {key!r}: {exc}") from exc

    def _set_json(self, key: str, value: Any) -> None:
        self.set_record(key, json.dumps(value, ensure_ascii=False))

    # ---- task list ----

    def load_tasks(self) -> list[Task]:
        data = self._get_json(TASKS_KEY)
        if data is None:
            return []
        try:
            return decode_tasks(data)
        except ValueError as exc:
            raise PersistenceError(f"Corrupt record {TASKS_KEY!r}: {exc}") from exc

    def save_tasks(self, tasks: list[Task]) -> None:
        self._set_json(TASKS_KEY, [t.to_dict() for t in tasks])

    # ---- PlannerStateRepo ----

    def load_templates(self) -> list[RecurringTemplate] | None:
        data = self._get_json(TEMPLATES_KEY)
        if data is None:
            return None
        if not isinstance(data, list):
            raise PersistenceError(f"Corrupt record {TEMPLATES_KEY!r}: expected a list")
        out: list[RecurringTemplate] = []
        for rec in data:
            try:
                out.append(RecurringTemplate.from_dict(rec))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed template record: %r", rec)
        return out

    def save_templates(self, templates: list[RecurringTemplate]) -> None:
        self._set_json(TEMPLATES_KEY, [t.to_dict() for t in templates])

    def load_last_reset_date(self) -> date | None:
        raw = self.get_record(LAST_RESET_KEY)
        if not raw:
            return None
        try:
            return date.fromisoformat(raw.strip())
        except ValueError:
            # Unreadable marker: treat as "never reset" so today's reset runs.
            logger.warning("Ignoring unreadable %s=%r", LAST_RESET_KEY, raw)
            return None

    def save_last_reset_date(self, day: date) -> None:
        self.set_record(LAST_RESET_KEY, day.isoformat())


class LocalTaskStore:
    """
    TaskStoreAdapter over the `tasks` record of a LocalStateStore.

    Every write is read-modify-write of the whole list. Methods are async only
    to share the adapter contract with the remote store.
    """

    def __init__(self, state: LocalStateStore) -> None:
        self._state = state

    async def fetch_all(self) -> list[Task]:
        return self._state.load_tasks()

    async def add(self, task: Task) -> WriteResult:
        tasks = self._state.load_tasks()
        if any(t.id == task.id for t in tasks):
            return WriteResult.failure(f"Task id already exists: {task.id}")
        self._state.save_tasks([*tasks, task])
        logger.debug("Task added id=%s recurring=%s", task.id, task.is_recurring)
        return WriteResult.success()

    async def update(self, task_id: str, fields: dict[str, Any]) -> WriteResult:
        tasks = self._state.load_tasks()
        out: list[Task] = []
        found = False
        for t in tasks:
            if t.id == task_id:
                found = True
                merged = {**t.to_dict(), **fields, "id": t.id}
                try:
                    t = Task.from_dict(merged)
                except (KeyError, ValueError) as exc:
                    return WriteResult.failure(f"Invalid update for {task_id}: {exc}")
            out.append(t)
        if not found:
            return WriteResult.failure(f"Task not found: {task_id}")
        self._state.save_tasks(out)
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(fields))
        return WriteResult.success()

    async def delete(self, task_id: str) -> WriteResult:
        tasks = self._state.load_tasks()
        remaining = [t for t in tasks if t.id != task_id]
        if len(remaining) == len(tasks):
            return WriteResult.failure(f"Task not found: {task_id}")
        self._state.save_tasks(remaining)
        logger.debug("Task deleted id=%s", task_id)
        return WriteResult.success()

    async def clear_one_time(self) -> WriteResult:
        tasks = self._state.load_tasks()
        remaining = [t for t in tasks if t.is_recurring]
        self._state.save_tasks(remaining)
        logger.debug("Cleared %d one-time tasks", len(tasks) - len(remaining))
        return WriteResult.success()

    async def reset_recurring(self, new_instances: list[Task]) -> WriteResult:
        tasks = self._state.load_tasks()
        kept = [t for t in tasks if not t.is_recurring]
        self._state.save_tasks([*kept, *new_instances])
        logger.debug("Recurring instances replaced: %d", len(new_instances))
        return WriteResult.success()

    async def aclose(self) -> None:
        # Short-lived sqlite connections per call; nothing to close.
        return
