# src/qtodo/tasks/due_evaluator.py

from __future__ import annotations

"""
Due-task evaluator.

A small polling loop that:
- re-reads every task from the injected repo each tick (no delta tracking),
- picks the ones whose alarm has passed and that are not acknowledged,
- hands each of them to an injected listener.

Acknowledging is up to the UI (repo.set_acknowledged). Until then a due task
fires again on every tick.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

from ..core.ports import DueTaskListener, TaskRepo
from .task_models import Task

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class DueTask:
    """What the evaluator reports to the listener."""

    task_id: int
    name: str
    due_at: datetime


def is_due(task: Task, now: datetime) -> bool:
    """Unacknowledged and now >= due instant (ties count as due)."""
    return not task.acknowledged and now >= task.due_at


def find_due_tasks(tasks: Iterable[Task], now: datetime) -> list[DueTask]:
    return [DueTask(task_id=t.id, name=t.name, due_at=t.due_at) for t in tasks if is_due(t, now)]


def evaluate_due_tasks(repo: TaskRepo, now: datetime) -> list[DueTask]:
    return find_due_tasks(repo.list_all(), now)


async def run_due_checker(
        repo: TaskRepo,
        listener: DueTaskListener,
        *,
        interval_seconds: float = 60.0,
        clock: Callable[[], datetime] = datetime.now,
) -> None:
    """
    Simple polling checker.

    Every interval_seconds:
    - evaluate all tasks against clock()
    - await listener.on_task_due(...) for each due task
      On failure:
        - a storage error skips the tick
        - a listener error is logged; the remaining tasks are still reported

    To stop the checker, cancel the coroutine/task.
    """
    sleep_s = max(0.5, float(interval_seconds))
    logger.info("Due checker started (interval=%.1fs)", sleep_s)

    while True:
        now = clock()

        try:
            due_tasks = evaluate_due_tasks(repo, now)
        except Exception:
            logger.exception("evaluate_due_tasks failed")
            due_tasks = []

        if due_tasks:
            logger.debug("Tick at %s: %d due task(s)", now.isoformat(timespec="seconds"), len(due_tasks))

        for due in due_tasks:
            try:
                await listener.on_task_due(due)
            except Exception:
                logger.exception("on_task_due failed task_id=%s", due.task_id)

        await asyncio.sleep(sleep_s)
