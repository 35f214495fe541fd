# src/day_planner/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_task_list
from ..core.state import AppState
from ..tasks.status_ticker import StatusChange, run_status_ticker

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _print_changes(changes: list[StatusChange]) -> None:
    for ch in changes:
        _print_ts(f"[STATUS] {ch.task.name} ({ch.task.start_time}-{ch.task.end_time}) is now {ch.current.value}")


async def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL.

    input() runs in a worker thread so the status ticker keeps running on the
    event loop between commands.
    """
    logger.info("Console connector started.")
    planner = state.planner
    tick_seconds = float(getattr(state.settings, "tick_seconds", 1.0))

    now = planner.now()
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.")
    print(render_task_list(planner.statuses(now), now), flush=True)

    ticker = asyncio.create_task(
        run_status_ticker(planner, _print_changes, interval_seconds=tick_seconds)
    )
    try:
        while True:
            try:
                user_input = (await asyncio.to_thread(input, ">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                reply = await command_registry.handle(state, user_input)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is None:
                reply = "Commands start with '/'. Use /help to list available commands."
            _print_ts(reply)
    finally:
        ticker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await ticker

    logger.info("Console connector finished.")
