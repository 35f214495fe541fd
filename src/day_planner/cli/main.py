# src/day_planner/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads tasks (running the daily reset
check), then hands control to the console REPL until /exit or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.errors import PlannerError
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(state: AppState) -> None:
    try:
        try:
            await state.planner.load()
        except PlannerError as exc:
            # Keep the REPL usable; /reload retries.
            logger.error("Initial load failed: %s", exc)
            print(f"Failed to load tasks: {exc}. Use /reload to retry.", flush=True)
        await run_console_loop(state)
    finally:
        await state.planner.aclose()


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.info("Starting %s (storage=%s)...", settings.app_name, settings.storage_backend)

    try:
        state = create_initial_state(settings=settings)
    except (PlannerError, ValueError) as exc:
        logger.error("Startup failed: %s", exc)
        raise SystemExit(f"{settings.app_name}: {exc}") from exc

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt, exiting.")
        print()

    logger.info("Bye.")


if __name__ == "__main__":
    main()
