# src/day_planner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the task store (local SQLite or remote web app) from settings,
- wires store, registry and task list into a Planner held by AppState.
"""

from __future__ import annotations

import logging

from ..config import STORAGE_LOCAL, STORAGE_REMOTE, get_settings
from ..core.ports import TaskStoreAdapter
from ..core.state import AppState
from ..storage.local_store import LocalStateStore, LocalTaskStore
from ..storage.remote_store import RemoteTaskStore
from ..tasks.planner import Planner
from ..tasks.task_registry import RecurringTaskRegistry

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.state_db_path.parent.mkdir(parents=True, exist_ok=True)


def build_task_store(settings, local_state: LocalStateStore) -> TaskStoreAdapter:
    backend = str(getattr(settings, "storage_backend", STORAGE_LOCAL)).lower()
    if backend == STORAGE_REMOTE:
        endpoint = str(getattr(settings, "api_endpoint", "") or "").strip()
        if not endpoint:
            raise ValueError(
                "DAYPLAN_STORAGE=remote requires DAYPLAN_API_ENDPOINT to be set"
            )
        return RemoteTaskStore(endpoint, timeout_seconds=float(settings.api_timeout_seconds))
    if backend == STORAGE_LOCAL:
        return LocalTaskStore(local_state)
    raise ValueError(f"Unknown storage backend {backend!r} (expected 'local' or 'remote')")


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    # Templates and the reset marker always live locally, even with a remote task store.
    local_state = LocalStateStore(settings.state_db_path)
    registry = RecurringTaskRegistry(local_state)
    if getattr(settings, "seed_defaults", True):
        registry.seed_defaults()

    store = build_task_store(settings, local_state)
    planner = Planner(store, local_state, registry)
    logger.info(
        "Planner wired backend=%s templates=%d",
        getattr(settings, "storage_backend", STORAGE_LOCAL),
        len(registry),
    )
    return AppState(settings=settings, planner=planner)
