# src/day_planner/tasks/task_list.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING

from ..core.errors import NotFoundError, ValidationError
from .task_models import Task, TaskStatus, parse_hhmm, validate_window

if TYPE_CHECKING:
    from .task_registry import RecurringTaskRegistry

logger = logging.getLogger(__name__)


def status_of(task: Task, now: datetime) -> TaskStatus:
    """
    Classify a task relative to `now`.

    Start/end instants are built on now's calendar date from the task's HH:MM
    fields; both bounds are inclusive for "current".
    """
    if task.completed:
        return TaskStatus.COMPLETED

    sh, sm = parse_hhmm(task.start_time, field_name="start time")
    eh, em = parse_hhmm(task.end_time, field_name="end time")
    start = now.replace(hour=sh, minute=sm, second=0, microsecond=0)
    end = now.replace(hour=eh, minute=em, second=0, microsecond=0)

    if now < start:
        return TaskStatus.UPCOMING
    if now <= end:
        return TaskStatus.CURRENT
    return TaskStatus.OVERDUE


class TaskList:
    """
    In-memory list of the current task instances (one-time + today's recurring).

    Mutations never edit the list in place: each builds a new list and rebinds
    it, so a snapshot taken by the status ticker stays consistent while a
    command is running.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: list[Task] = list(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self):
        return iter(self.snapshot())

    def snapshot(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def require(self, task_id: str) -> Task:
        task = self.get(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    def has_recurring_named(self, name: str) -> bool:
        return any(t.is_recurring and t.name == name for t in self._tasks)

    def replace(self, tasks: Iterable[Task]) -> None:
        self._tasks = list(tasks)

    # ---- mutations ----

    def add(self, task: Task) -> None:
        validate_window(task.name, task.start_time, task.end_time)
        if self.get(task.id) is not None:
            raise ValidationError(f"Duplicate task id: {task.id}")
        self._tasks = [*self._tasks, task]

    def toggle_complete(self, task_id: str) -> Task:
        """Flip `completed`. Returns the updated task."""
        old = self.require(task_id)
        new = replace(old, completed=not old.completed)
        self._tasks = [new if t.id == task_id else t for t in self._tasks]
        return new

    def delete(self, task_id: str) -> Task:
        """Remove one instance. Recurring templates are left alone."""
        task = self.require(task_id)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        return task

    def delete_with_template(self, task_id: str, registry: RecurringTaskRegistry) -> Task:
        """Remove the instance and, for a recurring task, its template (by name)."""
        task = self.delete(task_id)
        if task.is_recurring:
            registry.remove(task.name)
        return task

    def clear_one_time(self) -> int:
        kept = [t for t in self._tasks if t.is_recurring]
        removed = len(self._tasks) - len(kept)
        self._tasks = kept
        return removed

    def sort_by_start_time(self) -> None:
        # sorted() is stable: equal start times keep their relative order.
        self._tasks = sorted(self._tasks, key=lambda t: t.start_time)

    # ---- derived ----

    def one_time_count(self) -> int:
        return sum(1 for t in self._tasks if not t.is_recurring)

    def statuses(self, now: datetime) -> list[tuple[Task, TaskStatus]]:
        return [(t, status_of(t, now)) for t in self.snapshot()]
