# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from qtodo.connectors.console_connector import ConsoleAlarm
from qtodo.core.state import AppState
from qtodo.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="qtodo-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "todo.db",
        check_interval_seconds=60.0,
        alarm_bell=False,
    )


@pytest.fixture()
def alarm_lines() -> list[str]:
    return []


@pytest.fixture()
def state(settings: SimpleNamespace, alarm_lines: list[str]) -> AppState:
    """
    AppState wired with a real SQLite store and a silent console alarm.
    """
    return AppState(
        settings=settings,
        task_store=TaskStore(settings.tasks_db_path),
        alarm=ConsoleAlarm(bell=False, emit=alarm_lines.append),
    )
