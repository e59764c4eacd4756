# src/qtodo/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import StrEnum

TIME_FORMAT = "%H:%M"


class TaskDisplayState(StrEnum):
    """
    How a task is highlighted in the list.

    - due: the alarm has passed and nobody acknowledged it yet
    - acknowledged: acknowledged, and its due date is today
    """

    NORMAL = "normal"
    DUE = "due"
    ACKNOWLEDGED = "acknowledged"


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    name: str
    due_date: date
    alarm_time: time
    acknowledged: bool = False

    @property
    def due_at(self) -> datetime:
        """Due instant as a naive local datetime."""
        return datetime.combine(self.due_date, self.alarm_time)

    def display_state(self, now: datetime) -> TaskDisplayState:
        if not self.acknowledged and now >= self.due_at:
            return TaskDisplayState.DUE
        if self.acknowledged and self.due_date == now.date():
            return TaskDisplayState.ACKNOWLEDGED
        return TaskDisplayState.NORMAL


def format_date(value: date) -> str:
    # Four-digit year even below 1000, so parse_date reads it back.
    return value.isoformat()


def format_time(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def parse_date(raw: str) -> date:
    """Parse YYYY-MM-DD. Raises ValueError on anything else."""
    raw = raw.strip()
    if len(raw) != 10 or raw[4] != "-" or raw[7] != "-":
        raise ValueError(f"expected YYYY-MM-DD, got {raw!r}")
    return date.fromisoformat(raw)


def parse_time(raw: str) -> time:
    """Parse HH:MM (24h). Raises ValueError on anything else."""
    return datetime.strptime(raw.strip(), TIME_FORMAT).time()
