# src/day_planner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The planner depends on Protocols instead of concrete stores.
Local and remote task storage are interchangeable behind TaskStoreAdapter;
the planner never checks which one is active.
"""

from collections.abc import Awaitable
from datetime import date
from typing import Any, Protocol

from ..tasks.task_models import RecurringTemplate, Task, WriteResult


class TaskStoreAdapter(Protocol):
    """
    Uniform async contract over local and remote task storage.

    fetch_all raises TransportError / PersistenceError on failure; an empty
    list means "no tasks". Writes report failure through WriteResult.ok.
    """

    def fetch_all(self) -> Awaitable[list[Task]]: ...
    def add(self, task: Task) -> Awaitable[WriteResult]: ...
    def update(self, task_id: str, fields: dict[str, Any]) -> Awaitable[WriteResult]: ...
    def delete(self, task_id: str) -> Awaitable[WriteResult]: ...
    def clear_one_time(self) -> Awaitable[WriteResult]: ...
    def reset_recurring(self, new_instances: list[Task]) -> Awaitable[WriteResult]: ...
    def aclose(self) -> Awaitable[None]: ...


class PlannerStateRepo(Protocol):
    """
    Local records that survive restarts regardless of the task backend:
    the recurring template list and the last reset date.

    load_templates returns None when the record was never written, which is
    distinct from a persisted empty list.
    """

    def load_templates(self) -> list[RecurringTemplate] | None: ...
    def save_templates(self, templates: list[RecurringTemplate]) -> None: ...
    def load_last_reset_date(self) -> date | None: ...
    def save_last_reset_date(self, day: date) -> None: ...
