# src/day_planner/tasks/status_ticker.py

from __future__ import annotations

"""
Status ticker.

A small polling loop that:
- re-derives every task's status from a snapshot of the task list,
- reports tasks whose status changed since the previous tick,
- triggers the daily reset check when the calendar day rolls over.

It never writes task state itself; display belongs to the connector.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, datetime

from ..core.errors import PlannerError
from .planner import Planner
from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class StatusChange:
    task: Task
    previous: TaskStatus | None
    current: TaskStatus


StatusListener = Callable[[list[StatusChange]], Awaitable[None] | None]


class StatusTracker:
    """Remembers the last status per task id and diffs against the next tick."""

    def __init__(self) -> None:
        self._last: dict[str, TaskStatus] = {}

    def diff(self, statuses: list[tuple[Task, TaskStatus]]) -> list[StatusChange]:
        changes: list[StatusChange] = []
        seen: dict[str, TaskStatus] = {}
        for task, status in statuses:
            seen[task.id] = status
            prev = self._last.get(task.id)
            if prev is not None and prev != status:
                changes.append(StatusChange(task=task, previous=prev, current=status))
        # Tasks that vanished (deleted/reset) are forgotten; new ones are baselined silently.
        self._last = seen
        return changes


async def run_status_ticker(
    planner: Planner,
    on_change: StatusListener,
    *,
    interval_seconds: float = 1.0,
) -> None:
    """
    Every interval_seconds:
    - if the date moved past the last tick's date, run planner.check_daily_reset()
    - compute statuses from the current snapshot
    - call on_change(changes) when at least one task changed status

    To stop the ticker, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))
    tracker = StatusTracker()
    last_day: date | None = None

    while True:
        now: datetime = planner.now()

        if last_day is not None and now.date() != last_day:
            try:
                await planner.check_daily_reset(now)
            except PlannerError as exc:
                # Marker was not advanced; the next day change or restart retries.
                logger.warning("Daily reset on rollover failed: %s", exc)
        last_day = now.date()

        try:
            changes = tracker.diff(planner.statuses(now))
        except PlannerError:
            logger.exception("status derivation failed")
            changes = []

        if changes:
            try:
                res = on_change(changes)
                if res is not None:
                    await res
            except Exception:
                logger.exception("status listener failed")

        await asyncio.sleep(sleep_s)
