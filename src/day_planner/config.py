# src/day_planner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Consumers take settings as a parameter so tests can inject their own.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "DAYPLAN"

STORAGE_LOCAL = "local"
STORAGE_REMOTE = "remote"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    storage_backend: str
    api_endpoint: str
    api_timeout_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    state_db_path: Path

    # ---- Behaviour ----
    tick_seconds: float
    seed_defaults: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "day-planner").strip() or "day-planner"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        storage_backend = _env(_k("STORAGE"), STORAGE_LOCAL).strip().lower() or STORAGE_LOCAL
        api_endpoint = _env(_k("API_ENDPOINT"), "").strip()
        api_timeout_seconds = max(1.0, _env_float(_k("API_TIMEOUT_SECONDS"), 15.0))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/day_planner"))
        state_db_path = _env_path(_k("STATE_DB_PATH"), data_dir / "planner.sqlite3")

        tick_seconds = _env_float(_k("TICK_SECONDS"), 1.0)
        seed_defaults = _env_bool(_k("SEED_DEFAULTS"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            storage_backend=storage_backend,
            api_endpoint=api_endpoint,
            api_timeout_seconds=api_timeout_seconds,
            data_dir=data_dir,
            state_db_path=state_db_path,
            tick_seconds=tick_seconds,
            seed_defaults=seed_defaults,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
