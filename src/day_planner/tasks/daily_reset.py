# src/day_planner/tasks/daily_reset.py

from __future__ import annotations

"""
Daily reset.

Once per calendar day the recurring instances of yesterday are thrown away and
every template is materialized again as a fresh, uncompleted instance. One-time
tasks pass through untouched.

maybe_reset is pure: callers pass in today's date, the stored marker, the
templates and the current list, and get the new list and marker back. Persisting
the result (instances first, marker second) is the planner's job.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from .task_models import RecurringTemplate, Task

_WHITESPACE = re.compile(r"\s")


@dataclass(frozen=True, slots=True)
class ResetOutcome:
    did_reset: bool
    tasks: list[Task]
    last_reset_date: date | None

    @property
    def new_instances(self) -> list[Task]:
        return [t for t in self.tasks if t.is_recurring] if self.did_reset else []


def epoch_millis(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def recurring_instance_id(name: str, now: datetime, taken: set[str]) -> str:
    """
    recurring-<epoch ms>-<name, whitespace -> '-'>, suffixed with -2, -3, ...
    when two names collapse to the same id.
    """
    base = f"recurring-{epoch_millis(now)}-{_WHITESPACE.sub('-', name)}"
    candidate = base
    n = 2
    while candidate in taken:
        candidate = f"{base}-{n}"
        n += 1
    return candidate


def materialize(template: RecurringTemplate, *, now: datetime, taken: set[str]) -> Task:
    """Copy a template into a fresh per-day instance and claim its id in `taken`."""
    task_id = recurring_instance_id(template.name, now, taken)
    taken.add(task_id)
    return Task(
        id=task_id,
        name=template.name,
        start_time=template.start_time,
        end_time=template.end_time,
        description=template.description,
        completed=False,
        is_recurring=True,
        created_at=now,
    )


def maybe_reset(
    today: date,
    last_reset_date: date | None,
    templates: Iterable[RecurringTemplate],
    current_tasks: Iterable[Task],
    *,
    now: datetime | None = None,
) -> ResetOutcome:
    """
    Decide whether today's reset is due and compute the resulting task list.

    - same day as the marker: nothing changes (safe to call any number of times)
    - otherwise: one-time tasks first, in their original order, then exactly one
      fresh instance per template, in template order; marker becomes today
    """
    current = list(current_tasks)
    if last_reset_date is not None and last_reset_date == today:
        return ResetOutcome(did_reset=False, tasks=current, last_reset_date=last_reset_date)

    if now is None:
        now = datetime.now()

    kept = [t for t in current if not t.is_recurring]
    taken = {t.id for t in kept}
    fresh = [materialize(tpl, now=now, taken=taken) for tpl in templates]

    return ResetOutcome(did_reset=True, tasks=[*kept, *fresh], last_reset_date=today)
