# src/qtodo/tasks/task_api.py

"""
UI-facing helpers around the task store.

This is the error boundary: StorageError is logged and degrades into an
empty result, TaskNotFound becomes a quiet no-op. Nothing here raises
storage errors to the caller.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time

from ..core.state import AppState
from .errors import StorageError, TaskNotFound
from .task_models import Task, TaskDisplayState, format_date, format_time

logger = logging.getLogger(__name__)


def add_task(state: AppState, *, name: str, due_date: date, alarm_time: time) -> int | None:
    """
    Create a task. Empty (or whitespace-only) names are rejected here,
    not by the store. Returns the new id, or None if nothing was stored.
    """
    name = (name or "").strip()
    if not name:
        logger.info("Refusing to add a task with an empty name")
        return None

    try:
        task_id = state.task_store.add(name, due_date, alarm_time)
    except StorageError:
        logger.exception("add failed name=%r", name)
        return None

    logger.info("Task %s added: %r due %s %s", task_id, name, due_date, alarm_time)
    return task_id


def edit_task(
    state: AppState,
    task_id: int,
    *,
    name: str | None = None,
    due_date: date | None = None,
    alarm_time: time | None = None,
) -> bool:
    """Change the given fields of a task. Returns True if the task existed and was updated."""
    if name is not None:
        name = name.strip()
        if not name:
            logger.info("Refusing to rename task %s to an empty name", task_id)
            return False

    try:
        state.task_store.update_task(task_id, name=name, due_date=due_date, alarm_time=alarm_time)
    except TaskNotFound:
        logger.debug("edit_task: task %s does not exist", task_id)
        return False
    except StorageError:
        logger.exception("edit_task failed task_id=%s", task_id)
        return False
    return True


def delete_task(state: AppState, task_id: int) -> bool:
    """Returns True only if a task with this id existed and is now gone."""
    try:
        deleted = state.task_store.delete(task_id)
    except StorageError:
        logger.exception("delete failed task_id=%s", task_id)
        return False
    if not deleted:
        logger.debug("delete_task: task %s does not exist", task_id)
        return False
    logger.info("Task %s deleted", task_id)
    return True


def acknowledge_task(state: AppState, task_id: int, value: bool = True) -> bool:
    try:
        state.task_store.set_acknowledged(task_id, value)
    except TaskNotFound:
        logger.debug("acknowledge_task: task %s does not exist", task_id)
        return False
    except StorageError:
        logger.exception("set_acknowledged failed task_id=%s", task_id)
        return False
    logger.info("Task %s acknowledged=%s", task_id, value)
    return True


def get_task(state: AppState, task_id: int) -> Task | None:
    try:
        return state.task_store.get(task_id)
    except StorageError:
        logger.exception("get failed task_id=%s", task_id)
        return None


def list_tasks(state: AppState) -> list[Task]:
    try:
        return state.task_store.list_all()
    except StorageError:
        logger.exception("list_all failed")
        return []


def format_task_line(task: Task, now: datetime | None = None) -> str:
    """One list row: `#id  name  YYYY-MM-DD HH:MM  [state]`."""
    if now is None:
        now = datetime.now()
    line = f"#{task.id}  {task.name}  {format_date(task.due_date)} {format_time(task.alarm_time)}"
    view = task.display_state(now)
    if view is not TaskDisplayState.NORMAL:
        line += f"  [{view.value}]"
    return line
