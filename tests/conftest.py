# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from day_planner.core.state import AppState
from day_planner.storage.local_store import LocalStateStore, LocalTaskStore
from day_planner.tasks.planner import Planner
from day_planner.tasks.task_registry import RecurringTaskRegistry

from .fakes import FakeClock, FakeStateRepo, FakeTaskStore

# Monday morning, used as "now" unless a test moves the clock.
NOW = datetime(2026, 10, 19, 8, 30)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and connectors.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="day-planner-test",
        log_level="WARNING",
        storage_backend="local",
        api_endpoint="",
        api_timeout_seconds=5.0,
        data_dir=tmp_path,
        state_db_path=tmp_path / "planner.sqlite3",
        tick_seconds=0.01,
        seed_defaults=True,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture()
def fake_store() -> FakeTaskStore:
    return FakeTaskStore()


@pytest.fixture()
def state_repo() -> FakeStateRepo:
    return FakeStateRepo()


@pytest.fixture()
def registry(state_repo: FakeStateRepo) -> RecurringTaskRegistry:
    reg = RecurringTaskRegistry(state_repo)
    reg.seed_defaults()
    return reg


@pytest.fixture()
def planner(
    fake_store: FakeTaskStore,
    state_repo: FakeStateRepo,
    registry: RecurringTaskRegistry,
    clock: FakeClock,
) -> Planner:
    """Planner over in-memory fakes; the reset logic itself is real."""
    return Planner(fake_store, state_repo, registry, clock=clock)


@pytest.fixture()
def local_state(settings: SimpleNamespace) -> LocalStateStore:
    return LocalStateStore(settings.state_db_path)


@pytest.fixture()
def state(settings: SimpleNamespace, local_state: LocalStateStore, clock: FakeClock) -> AppState:
    """
    AppState wired with the real SQLite-backed local store.

    NOTE: we keep real SQLite here because persistence across the reset is
    part of what we want to test.
    """
    registry = RecurringTaskRegistry(local_state)
    registry.seed_defaults()
    planner = Planner(LocalTaskStore(local_state), local_state, registry, clock=clock)
    return AppState(settings=settings, planner=planner)
