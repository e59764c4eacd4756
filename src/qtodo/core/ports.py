# src/qtodo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The UI and the due checker depend on Protocols instead of concrete implementations.
The SQLite store is supplied at startup; tests substitute an in-memory repo.
"""

from datetime import date, time
from typing import TYPE_CHECKING, Awaitable, Protocol

if TYPE_CHECKING:
    from ..tasks.due_evaluator import DueTask
    from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """
    Task Store contract.

    Mutations are durable when they return. Update/acknowledge calls raise
    TaskNotFound for a missing id; delete is a no-op for one.
    Any backend failure surfaces as StorageError.
    """

    def add(self, name: str, due_date: date, alarm_time: time) -> int: ...
    def get(self, task_id: int) -> Task | None: ...
    def list_all(self) -> list[Task]: ...
    def count_tasks(self) -> int: ...

    def update_name(self, task_id: int, name: str) -> None: ...
    def update_due_date(self, task_id: int, due_date: date) -> None: ...
    def update_alarm_time(self, task_id: int, alarm_time: time) -> None: ...
    def update_task(
            self,
            task_id: int,
            *,
            name: str | None = None,
            due_date: date | None = None,
            alarm_time: time | None = None,
    ) -> None: ...

    def delete(self, task_id: int) -> bool: ...

    def set_acknowledged(self, task_id: int, value: bool) -> None: ...
    def get_acknowledged(self, task_id: int) -> bool: ...


class DueTaskListener(Protocol):
    """
    Notification-side port: what the due checker calls for each due task.

    The listener decides how to alert (sound, highlight, console line).
    It must return quickly; acknowledgement happens later through the UI.
    """

    def on_task_due(self, due: DueTask) -> Awaitable[None]: ...
