# src/qtodo/tasks/errors.py

from __future__ import annotations


class TaskError(Exception):
    """Base class for task store failures."""


class StorageError(TaskError):
    """The database file is unavailable, unreadable or corrupt."""


class TaskNotFound(TaskError):
    """An operation referenced a task id that does not exist."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"task {task_id} not found")
        self.task_id = task_id
