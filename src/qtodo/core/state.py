# src/qtodo/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .ports import DueTaskListener, TaskRepo


@dataclass
class AppState:
    # Settings object (qtodo.config.Settings or a test double with the same attributes).
    settings: Any

    task_store: TaskRepo
    alarm: DueTaskListener | None = None
