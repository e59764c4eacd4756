# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, time

from qtodo.tasks.due_evaluator import DueTask
from qtodo.tasks.errors import StorageError, TaskNotFound
from qtodo.tasks.task_models import Task


class InMemoryTaskRepo:
    """
    In-memory TaskRepo with the same contract as the SQLite store:
    ids are never reused, alarm times are kept to the minute,
    updates on a missing id raise TaskNotFound, delete reports whether it removed anything.
    """

    def __init__(self) -> None:
        self.tasks: dict[int, Task] = {}
        self._next_id = 1

    def add(self, name: str, due_date: date, alarm_time: time) -> int:
        task_id = self._next_id
        self._next_id += 1
        self.tasks[task_id] = Task(
            id=task_id,
            name=name,
            due_date=due_date,
            alarm_time=alarm_time.replace(second=0, microsecond=0),
        )
        return task_id

    def get(self, task_id: int) -> Task | None:
        return self.tasks.get(task_id)

    def list_all(self) -> list[Task]:
        return [self.tasks[k] for k in sorted(self.tasks)]

    def count_tasks(self) -> int:
        return len(self.tasks)

    def _replace(self, task_id: int, **changes) -> None:
        t = self.tasks.get(task_id)
        if t is None:
            raise TaskNotFound(task_id)
        self.tasks[task_id] = replace(t, **changes)

    def update_name(self, task_id: int, name: str) -> None:
        self._replace(task_id, name=name)

    def update_due_date(self, task_id: int, due_date: date) -> None:
        self._replace(task_id, due_date=due_date)

    def update_alarm_time(self, task_id: int, alarm_time: time) -> None:
        self._replace(task_id, alarm_time=alarm_time.replace(second=0, microsecond=0))

    def update_task(self, task_id: int, *, name=None, due_date=None, alarm_time=None) -> None:
        changes = {}
        if name is not None:
            changes["name"] = name
        if due_date is not None:
            changes["due_date"] = due_date
        if alarm_time is not None:
            changes["alarm_time"] = alarm_time.replace(second=0, microsecond=0)
        if not changes and task_id not in self.tasks:
            raise TaskNotFound(task_id)
        if changes:
            self._replace(task_id, **changes)

    def delete(self, task_id: int) -> bool:
        return self.tasks.pop(task_id, None) is not None

    def set_acknowledged(self, task_id: int, value: bool) -> None:
        self._replace(task_id, acknowledged=bool(value))

    def get_acknowledged(self, task_id: int) -> bool:
        t = self.tasks.get(task_id)
        return t.acknowledged if t else False


class BrokenTaskRepo:
    """TaskRepo whose backing database is gone: every call raises StorageError."""

    def __getattr__(self, name: str):
        def _fail(*args, **kwargs):
            raise StorageError(f"{name}: database unavailable")

        return _fail


@dataclass(slots=True)
class RecordingListener:
    """
    Fake DueTaskListener used by due-checker tests.
    """

    reports: list[DueTask] = field(default_factory=list)
    fail_for: set[int] = field(default_factory=set)

    async def on_task_due(self, due: DueTask) -> None:
        if due.task_id in self.fail_for:
            raise RuntimeError(f"listener failed for {due.task_id}")
        self.reports.append(due)
