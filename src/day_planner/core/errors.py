# src/day_planner/core/errors.py

"""
Planner error taxonomy.

Every failure that reaches the user is one of these; the console prints
str(exc) verbatim.
"""

from __future__ import annotations


class PlannerError(Exception):
    """Base class for user-visible planner failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(PlannerError):
    """Bad user input. The operation is aborted with no state change."""


class NotFoundError(PlannerError):
    """An operation referenced a task id that is not in the current list."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class TransportError(PlannerError):
    """Remote call failed or returned a non-success response."""


class PersistenceError(PlannerError):
    """Local storage read/write failed."""
