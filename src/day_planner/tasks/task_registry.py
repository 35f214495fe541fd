# src/day_planner/tasks/task_registry.py

from __future__ import annotations

import logging

from ..core.ports import PlannerStateRepo
from .task_models import RecurringTemplate, validate_window

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES: tuple[RecurringTemplate, ...] = (
    RecurringTemplate("Wake Up", "07:00", "07:30", "Start your day!"),
    RecurringTemplate("Brush Teeth", "07:30", "07:45", "Maintain oral hygiene."),
    RecurringTemplate("Morning Prayers", "07:45", "08:00", "Start your day with spiritual reflection."),
)


class RecurringTaskRegistry:
    """
    Durable set of recurring task templates, keyed by name.

    Seeding rules:
    - seed_defaults() populates the starter set only if no templates record was
      ever persisted
    - a persisted empty list means the user removed everything; it stays empty

    Every change is written through to the repo immediately.
    """

    def __init__(
        self,
        repo: PlannerStateRepo,
        *,
        defaults: tuple[RecurringTemplate, ...] = DEFAULT_TEMPLATES,
    ) -> None:
        self._repo = repo
        self._defaults = defaults
        stored = repo.load_templates()
        self._initialized = stored is not None
        self._templates: list[RecurringTemplate] = list(stored or [])
        logger.info(
            "RecurringTaskRegistry ready templates=%d initialized=%s",
            len(self._templates),
            self._initialized,
        )

    @property
    def initialized(self) -> bool:
        return self._initialized

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def get(self, name: str) -> RecurringTemplate | None:
        key = name.strip()
        for t in self._templates:
            if t.name == key:
                return t
        return None

    def list_all(self) -> list[RecurringTemplate]:
        """Templates in insertion order."""
        return list(self._templates)

    def ensure_present(self, name: str, definition: RecurringTemplate) -> bool:
        """
        Insert a template unless one with this name already exists.

        Never updates an existing template. Returns True if inserted.
        """
        key = name.strip()
        validate_window(key, definition.start_time, definition.end_time)
        if self.get(key) is not None:
            logger.debug("Template %r already present; skipping", key)
            return False

        template = RecurringTemplate(
            name=key,
            start_time=definition.start_time,
            end_time=definition.end_time,
            description=definition.description,
        )
        self._commit([*self._templates, template])
        logger.info("Template added name=%r %s-%s", key, template.start_time, template.end_time)
        return True

    def remove(self, name: str) -> bool:
        key = name.strip()
        remaining = [t for t in self._templates if t.name != key]
        if len(remaining) == len(self._templates):
            return False
        self._commit(remaining)
        logger.info("Template removed name=%r", key)
        return True

    def restore(self, templates: list[RecurringTemplate]) -> None:
        """Write back an earlier list_all() result, e.g. after a failed store write."""
        self._commit(list(templates))
        logger.info("Templates restored count=%d", len(templates))

    def seed_defaults(self) -> bool:
        """Populate the built-in starter set on first run only. Returns True if seeded."""
        if self._initialized:
            return False
        self._commit(list(self._defaults))
        logger.info("Seeded %d default recurring templates", len(self._defaults))
        return True

    def _commit(self, templates: list[RecurringTemplate]) -> None:
        # Persist first; the in-memory set only changes if the write succeeded.
        self._repo.save_templates(templates)
        self._templates = templates
        self._initialized = True
