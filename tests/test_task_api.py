# tests/test_task_api.py

from __future__ import annotations

from datetime import date, datetime, time
from types import SimpleNamespace

import pytest

from qtodo.core.state import AppState
from qtodo.tasks import task_api
from qtodo.tasks.task_models import Task, TaskDisplayState, format_date, parse_date

from .fakes import BrokenTaskRepo, InMemoryTaskRepo


def _state(repo) -> AppState:
    return AppState(settings=SimpleNamespace(), task_store=repo)


def test_add_task_rejects_empty_names() -> None:
    repo = InMemoryTaskRepo()
    state = _state(repo)

    assert task_api.add_task(state, name="", due_date=date(2024, 1, 1), alarm_time=time(9, 0)) is None
    assert task_api.add_task(state, name="   ", due_date=date(2024, 1, 1), alarm_time=time(9, 0)) is None
    assert repo.list_all() == []


def test_add_task_strips_and_stores(state) -> None:
    task_id = task_api.add_task(
        state, name="  Pay rent  ", due_date=date(2024, 3, 1), alarm_time=time(8, 0)
    )
    assert task_id is not None
    task = task_api.get_task(state, task_id)
    assert task is not None
    assert task.name == "Pay rent"


def test_operations_on_missing_task_report_false(state) -> None:
    assert task_api.edit_task(state, 404, name="x") is False
    assert task_api.edit_task(state, 404) is False
    assert task_api.acknowledge_task(state, 404) is False
    assert task_api.delete_task(state, 404) is False
    assert task_api.list_tasks(state) == []


def test_edit_task_refuses_empty_rename(state) -> None:
    task_id = task_api.add_task(state, name="keep", due_date=date(2024, 1, 1), alarm_time=time(9, 0))
    assert task_id is not None

    assert task_api.edit_task(state, task_id, name="  ") is False
    task = task_api.get_task(state, task_id)
    assert task is not None
    assert task.name == "keep"


def test_fake_repo_reports_missing_task_like_sqlite() -> None:
    state = _state(InMemoryTaskRepo())
    task_id = task_api.add_task(state, name="t", due_date=date(2024, 1, 1), alarm_time=time(9, 0))
    assert task_id is not None

    assert task_api.edit_task(state, task_id) is True
    assert task_api.edit_task(state, task_id + 1) is False
    assert task_api.delete_task(state, task_id) is True
    assert task_api.delete_task(state, task_id) is False


def test_storage_errors_degrade_to_empty_results() -> None:
    state = _state(BrokenTaskRepo())

    assert task_api.list_tasks(state) == []
    assert task_api.get_task(state, 1) is None
    assert task_api.add_task(state, name="x", due_date=date(2024, 1, 1), alarm_time=time(9, 0)) is None
    assert task_api.edit_task(state, 1, name="y") is False
    assert task_api.delete_task(state, 1) is False
    assert task_api.acknowledge_task(state, 1) is False


def test_display_state_and_task_line() -> None:
    now = datetime(2024, 3, 1, 12, 0)
    pending = Task(id=1, name="later", due_date=date(2024, 3, 2), alarm_time=time(8, 0))
    due = Task(id=2, name="now", due_date=date(2024, 3, 1), alarm_time=time(8, 0))
    acked_today = Task(
        id=3, name="seen", due_date=date(2024, 3, 1), alarm_time=time(8, 0), acknowledged=True
    )
    acked_old = Task(
        id=4, name="old", due_date=date(2024, 2, 1), alarm_time=time(8, 0), acknowledged=True
    )

    assert pending.display_state(now) is TaskDisplayState.NORMAL
    assert due.display_state(now) is TaskDisplayState.DUE
    assert acked_today.display_state(now) is TaskDisplayState.ACKNOWLEDGED
    assert acked_old.display_state(now) is TaskDisplayState.NORMAL

    assert task_api.format_task_line(pending, now) == "#1  later  2024-03-02 08:00"
    assert task_api.format_task_line(due, now) == "#2  now  2024-03-01 08:00  [due]"


def test_dates_use_four_digit_years() -> None:
    assert format_date(date(999, 1, 1)) == "0999-01-01"
    assert parse_date("0999-01-01") == date(999, 1, 1)
    assert parse_date(" 2024-03-01 ") == date(2024, 3, 1)

    for raw in ("999-01-01", "2024-3-1", "20240301", "2024-W01-1", "not-a-date"):
        with pytest.raises(ValueError):
            parse_date(raw)
