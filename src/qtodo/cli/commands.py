# src/qtodo/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import format_date, format_time, parse_date, parse_time

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


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

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
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

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_id(raw: str) -> int | None:
    raw = raw.lstrip("#")
    return int(raw) if raw.isdigit() else None


def _silence(state: AppState, task_id: int) -> None:
    silence = getattr(state.alarm, "silence", None)
    if callable(silence):
        silence(task_id)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = task_api.list_tasks(state)
    if not tasks:
        return "No tasks."
    now = datetime.now()
    return "\n".join(task_api.format_task_line(t, now) for t in tasks)


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add YYYY-MM-DD HH:MM name..."""
    usage = "Usage: /add YYYY-MM-DD HH:MM task name"
    if len(args) < 3:
        return usage
    try:
        due_date = parse_date(args[0])
        alarm_time = parse_time(args[1])
    except ValueError:
        return usage

    task_id = task_api.add_task(state, name=" ".join(args[2:]), due_date=due_date, alarm_time=alarm_time)
    if task_id is None:
        return "Task was not added (see log)."
    return f"Added task #{task_id}."


def cmd_show(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /show ID"
    task = task_api.get_task(state, task_id)
    if task is None:
        return f"No task #{task_id}."
    return (
        f"Task #{task.id}\n"
        f"  Name: {task.name}\n"
        f"  Due date: {format_date(task.due_date)}\n"
        f"  Alarm time: {format_time(task.alarm_time)}\n"
        f"  Acknowledged: {'yes' if task.acknowledged else 'no'}"
    )


def cmd_rename(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None or len(args) < 2:
        return "Usage: /rename ID new name"
    if not task_api.edit_task(state, task_id, name=" ".join(args[1:])):
        return f"Task #{task_id} was not renamed."
    _silence(state, task_id)
    return f"Task #{task_id} renamed."


def cmd_due(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None or len(args) != 2:
        return "Usage: /due ID YYYY-MM-DD"
    try:
        due_date = parse_date(args[1])
    except ValueError:
        return "Usage: /due ID YYYY-MM-DD"
    if not task_api.edit_task(state, task_id, due_date=due_date):
        return f"Task #{task_id} was not updated."
    _silence(state, task_id)
    return f"Task #{task_id} is now due on {format_date(due_date)}."


def cmd_alarm(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None or len(args) != 2:
        return "Usage: /alarm ID HH:MM"
    try:
        alarm_time = parse_time(args[1])
    except ValueError:
        return "Usage: /alarm ID HH:MM"
    if not task_api.edit_task(state, task_id, alarm_time=alarm_time):
        return f"Task #{task_id} was not updated."
    _silence(state, task_id)
    return f"Task #{task_id} alarm set to {format_time(alarm_time)}."


def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit ID YYYY-MM-DD HH:MM name... -> replace all three fields."""
    usage = "Usage: /edit ID YYYY-MM-DD HH:MM task name"
    task_id = _parse_id(args[0]) if args else None
    if task_id is None or len(args) < 4:
        return usage
    try:
        due_date = parse_date(args[1])
        alarm_time = parse_time(args[2])
    except ValueError:
        return usage

    ok = task_api.edit_task(
        state, task_id, name=" ".join(args[3:]), due_date=due_date, alarm_time=alarm_time
    )
    if not ok:
        return f"Task #{task_id} was not updated."
    _silence(state, task_id)
    return f"Task #{task_id} updated."


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /del ID"
    if not task_api.delete_task(state, task_id):
        return f"No task #{task_id} to delete."
    _silence(state, task_id)
    return f"Task #{task_id} deleted."


def cmd_ack(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /ack ID"
    if not task_api.acknowledge_task(state, task_id):
        return f"No task #{task_id} to acknowledge."
    _silence(state, task_id)
    return f"Task #{task_id} acknowledged."


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    try:
        total = str(state.task_store.count_tasks())
    except Exception:
        logger.exception("count_tasks failed")
        total = "unavailable"
    return (
        "Status:\n"
        f"  Database: {getattr(settings, 'tasks_db_path', '?')}\n"
        f"  Check interval: {getattr(settings, 'check_interval_seconds', '?')}s\n"
        f"  Tasks: {total}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List all tasks.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add YYYY-MM-DD HH:MM name.")
registry.register("show", cmd_show, help_text="Show one task: /show ID.")
registry.register("rename", cmd_rename, help_text="Rename a task: /rename ID name.")
registry.register("due", cmd_due, help_text="Change the due date: /due ID YYYY-MM-DD.")
registry.register("alarm", cmd_alarm, help_text="Change the alarm time: /alarm ID HH:MM.")
registry.register(
    "edit", cmd_edit, help_text="Replace date, time and name: /edit ID YYYY-MM-DD HH:MM name."
)
registry.register("del", cmd_delete, help_text="Delete a task: /del ID.", aliases=["rm"])
registry.register("ack", cmd_ack, help_text="Acknowledge a due task and stop its alarm: /ack ID.")
registry.register("status", cmd_status, help_text="Show database path, interval and task count.")
