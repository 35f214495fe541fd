# src/day_planner/tasks/planner.py

from __future__ import annotations

"""
Planner service.

Composition of store adapter, template registry, reset marker and the
in-memory task list. Every command follows the same order:
- validate against the in-memory list (no I/O on bad input)
- persist through the store adapter
- only after a successful write, apply the same change in memory

Recurring templates are local; they are changed before the store write and
rolled back if that write fails.

A failed write raises TransportError with the store's message and leaves the
in-memory list untouched, so repeating the command is safe.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime

from ..core.errors import NotFoundError, PlannerError, TransportError, ValidationError
from ..core.ports import PlannerStateRepo, TaskStoreAdapter
from .daily_reset import epoch_millis, materialize, maybe_reset
from .task_list import TaskList
from .task_models import RecurringTemplate, Task, TaskStatus, WriteResult, validate_window
from .task_registry import RecurringTaskRegistry

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _raise_on_failure(result: WriteResult, fallback: str) -> None:
    if not result.ok:
        raise TransportError(result.message or fallback)


class Planner:
    def __init__(
        self,
        store: TaskStoreAdapter,
        state_repo: PlannerStateRepo,
        registry: RecurringTaskRegistry,
        *,
        task_list: TaskList | None = None,
        clock: Clock = datetime.now,
    ) -> None:
        self.store = store
        self.state_repo = state_repo
        self.registry = registry
        self.tasks = task_list if task_list is not None else TaskList()
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self._clock().date()

    @property
    def last_reset_date(self) -> date | None:
        return self.state_repo.load_last_reset_date()

    # ---- startup / reset ----

    async def load(self) -> tuple[Task, ...]:
        """Fetch every task from the store, then run the daily reset check."""
        fetched = await self.store.fetch_all()
        self.tasks.replace(fetched)
        logger.info("Loaded %d tasks", len(fetched))
        await self.check_daily_reset()
        return self.tasks.snapshot()

    async def check_daily_reset(self, now: datetime | None = None) -> bool:
        """
        Run today's reset if it has not been recorded yet.

        Order matters: the new recurring instances are written first; the
        marker is advanced only after that write succeeded. A failure leaves
        the marker on the old date so the next load redoes the whole reset.
        """
        now = now or self.now()
        today = now.date()
        outcome = maybe_reset(
            today,
            self.state_repo.load_last_reset_date(),
            self.registry.list_all(),
            self.tasks.snapshot(),
            now=now,
        )
        if not outcome.did_reset:
            logger.debug("Same day (%s), no reset needed", today)
            return False

        logger.info("New day %s detected, resetting %d recurring tasks", today, len(self.registry))
        result = await self.store.reset_recurring(outcome.new_instances)
        _raise_on_failure(result, "Failed to reset daily tasks.")

        if outcome.last_reset_date is not None:
            self.state_repo.save_last_reset_date(outcome.last_reset_date)
        self.tasks.replace(outcome.tasks)
        return True

    # ---- commands ----

    def _new_one_time_id(self, now: datetime) -> str:
        ms = epoch_millis(now)
        while self.tasks.get(str(ms)) is not None:
            ms += 1
        return str(ms)

    async def add_task(
        self,
        name: str,
        start_time: str,
        end_time: str,
        description: str = "",
        *,
        recurring: bool = False,
    ) -> Task:
        name = (name or "").strip()
        start_time = (start_time or "").strip()
        end_time = (end_time or "").strip()
        description = (description or "").strip()
        validate_window(name, start_time, end_time)

        now = self.now()
        if recurring:
            # Recurring slots are identified by name; one instance per name per day.
            if self.tasks.has_recurring_named(name):
                raise ValidationError(f"A recurring task named {name!r} already exists today")
            template = RecurringTemplate(name, start_time, end_time, description)
            task = materialize(template, now=now, taken={t.id for t in self.tasks})
        else:
            task = Task(
                id=self._new_one_time_id(now),
                name=name,
                start_time=start_time,
                end_time=end_time,
                description=description,
                completed=False,
                is_recurring=False,
                created_at=now,
            )

        # Template first: a failed local write aborts before the store is touched.
        inserted = recurring and self.registry.ensure_present(
            name, RecurringTemplate(name, start_time, end_time, description)
        )
        try:
            result = await self.store.add(task)
            _raise_on_failure(result, "Failed to add task.")
        except PlannerError:
            if inserted:
                self.registry.remove(name)
            raise
        self.tasks.add(task)
        logger.info("Task added id=%s name=%r recurring=%s", task.id, name, recurring)
        return task

    async def toggle_complete(self, task_id: str) -> Task:
        task = self.tasks.require(task_id)
        result = await self.store.update(task_id, {"completed": not task.completed})
        _raise_on_failure(result, "Failed to update task status.")
        if self.tasks.get(task_id) is None:
            # The daily reset swapped the list while the update was in flight.
            logger.warning("Task %s was replaced by the daily reset; toggle not applied", task_id)
            raise NotFoundError(task_id)
        updated = self.tasks.toggle_complete(task_id)
        logger.info("Task %s completed=%s", task_id, updated.completed)
        return updated

    async def delete_task(self, task_id: str, *, keep_template: bool = False) -> Task:
        """
        Delete a task instance.

        For a recurring instance the template is removed too (the task will not
        come back tomorrow) unless keep_template=True. The template goes first
        and is put back if the store delete fails.
        """
        task = self.tasks.require(task_id)
        drop_template = task.is_recurring and not keep_template
        previous = self.registry.list_all()
        if drop_template:
            self.registry.remove(task.name)
        try:
            result = await self.store.delete(task_id)
            _raise_on_failure(result, "Failed to delete task.")
        except PlannerError:
            if drop_template:
                self.registry.restore(previous)
            raise

        if self.tasks.get(task_id) is None:
            logger.info("Task %s already replaced by the daily reset", task_id)
        elif drop_template:
            self.tasks.delete_with_template(task_id, self.registry)
        else:
            self.tasks.delete(task_id)
        logger.info("Task deleted id=%s recurring=%s keep_template=%s", task_id, task.is_recurring, keep_template)
        return task

    async def clear_one_time(self) -> int:
        """Remove all one-time tasks. Returns how many were removed (0 = nothing to do)."""
        if self.tasks.one_time_count() == 0:
            return 0
        result = await self.store.clear_one_time()
        _raise_on_failure(result, "Failed to clear one-time tasks.")
        removed = self.tasks.clear_one_time()
        logger.info("Cleared %d one-time tasks", removed)
        return removed

    def sort_by_start_time(self) -> tuple[Task, ...]:
        """Display-only ordering; nothing is written to the store."""
        self.tasks.sort_by_start_time()
        return self.tasks.snapshot()

    def statuses(self, now: datetime | None = None) -> list[tuple[Task, TaskStatus]]:
        return self.tasks.statuses(now or self.now())

    async def aclose(self) -> None:
        await self.store.aclose()
