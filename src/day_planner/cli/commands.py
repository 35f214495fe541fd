# src/day_planner/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..core.errors import PlannerError
from ..core.state import AppState
from ..tasks.task_models import Task, TaskStatus

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)

_STATUS_MARK = {
    TaskStatus.UPCOMING: "⏰",
    TaskStatus.CURRENT: "🔴",
    TaskStatus.OVERDUE: "⚠️",
    TaskStatus.COMPLETED: "✅",
}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        PlannerError messages are returned verbatim as the reply.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return await handler(state, args)
        except PlannerError as exc:
            logger.info("/%s failed: %s", name, exc)
            return f"Error: {exc}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task(task: Task, status: TaskStatus) -> str:
    kind = " [recurring]" if task.is_recurring else ""
    line = f"{_STATUS_MARK[status]} {task.start_time}-{task.end_time} {task.name} ({status.value}){kind}  id={task.id}"
    if task.description:
        line += f"\n      {task.description}"
    return line


def render_task_list(statuses: list[tuple[Task, TaskStatus]], now: datetime) -> str:
    header = f"{now:%Y-%m-%d %H:%M:%S}"
    if not statuses:
        return f"{header}\nNo tasks yet! Add your first task with /add."
    return "\n".join([header, *(format_task(t, s) for t, s in statuses)])


def parse_add_args(args: list[str]) -> tuple[str, str, str, str, bool]:
    """
    /add [-r] HH:MM HH:MM name words [| description words]

    Returns (name, start, end, description, recurring). Too few arguments
    raise ValueError; field validation is left to the planner.
    """
    recurring = False
    rest = list(args)
    if rest and rest[0] in ("-r", "--recurring"):
        recurring = True
        rest = rest[1:]
    if len(rest) < 3:
        raise ValueError("usage")

    start, end = rest[0], rest[1]
    text = " ".join(rest[2:])
    name, sep, description = text.partition("|")
    return name.strip(), start, end, description.strip() if sep else "", recurring


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str]) -> str:
    now = state.planner.now()
    return render_task_list(state.planner.statuses(now), now)


async def cmd_add(state: AppState, args: list[str]) -> str:
    try:
        name, start, end, description, recurring = parse_add_args(args)
    except ValueError:
        return "Usage: /add [-r] HH:MM HH:MM name [| description]"
    task = await state.planner.add_task(name, start, end, description, recurring=recurring)
    return f"Task added successfully! id={task.id}"


async def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task = await state.planner.toggle_complete(args[0])
    return "Task completed!" if task.completed else "Task marked as incomplete!"


async def cmd_delete(state: AppState, args: list[str]) -> str:
    """
    /del <id>          -> delete; a recurring task is removed permanently
    /del <id> --today  -> recurring task: drop today's instance only
    """
    if not args:
        return "Usage: /del <id> [--today]"
    keep_template = "--today" in args[1:]
    task = await state.planner.delete_task(args[0], keep_template=keep_template)
    if task.is_recurring and not keep_template:
        return f"Recurring task {task.name!r} removed from your everyday tasks."
    return "Task deleted successfully!"


async def cmd_clear(state: AppState, args: list[str]) -> str:
    removed = await state.planner.clear_one_time()
    if removed == 0:
        return "No one-time tasks to clear"
    return f"All one-time tasks cleared! ({removed})"


async def cmd_sort(state: AppState, args: list[str]) -> str:
    state.planner.sort_by_start_time()
    return "Tasks sorted by start time!\n" + await cmd_list(state, args)


async def cmd_templates(state: AppState, args: list[str]) -> str:
    templates = state.planner.registry.list_all()
    if not templates:
        return "No recurring templates."
    lines = ["Recurring templates:"]
    for t in templates:
        desc = f" - {t.description}" if t.description else ""
        lines.append(f"  {t.start_time}-{t.end_time} {t.name}{desc}")
    return "\n".join(lines)


async def cmd_reset(state: AppState, args: list[str]) -> str:
    did_reset = await state.planner.check_daily_reset()
    if did_reset:
        return "Recurring tasks reset for today."
    return f"Already reset today ({state.planner.last_reset_date})."


async def cmd_reload(state: AppState, args: list[str]) -> str:
    tasks = await state.planner.load()
    return f"Reloaded {len(tasks)} tasks."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks with live status.", aliases=["ls"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add [-r] HH:MM HH:MM name [| description]."
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register(
    "del", cmd_delete, help_text="Delete a task: /del <id> [--today].", aliases=["delete", "rm"]
)
registry.register("clear", cmd_clear, help_text="Delete all one-time tasks.")
registry.register("sort", cmd_sort, help_text="Sort tasks by start time.")
registry.register("templates", cmd_templates, help_text="Show recurring templates.")
registry.register("reset", cmd_reset, help_text="Run the daily reset check now.")
registry.register("reload", cmd_reload, help_text="Reload tasks from storage.")
