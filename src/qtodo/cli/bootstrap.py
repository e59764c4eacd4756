# src/qtodo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the concrete task store and alarm into AppState.

Raises StorageError when the database cannot be opened; the caller treats
that as fatal at startup.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.console_connector import ConsoleAlarm
from ..core.ports import DueTaskListener, TaskRepo
from ..core.state import AppState
from ..tasks.errors import StorageError
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    # The database directory is created (and its errors wrapped) by TaskStore.
    try:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"cannot create data directory {settings.data_dir}: {e}") from e


def create_initial_state(
    *,
    settings=None,
    task_store: TaskRepo | None = None,
    alarm: DueTaskListener | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and collaborators injectable makes the app easier to test
    and avoids hidden global state. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if task_store is None:
        task_store = TaskStore(settings.tasks_db_path)
    if alarm is None:
        alarm = ConsoleAlarm(bell=bool(getattr(settings, "alarm_bell", True)))

    logger.debug("State created db=%s", settings.tasks_db_path)
    return AppState(settings=settings, task_store=task_store, alarm=alarm)
