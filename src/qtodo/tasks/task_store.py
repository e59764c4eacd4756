# src/qtodo/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from datetime import date, time
from pathlib import Path
from typing import Any

from .errors import StorageError, TaskNotFound
from .task_models import Task, format_date, format_time, parse_date, parse_time

logger = logging.getLogger(__name__)

# SQLite INTEGER is a signed 64-bit value; ids outside it cannot exist.
_MAX_ROWID = 2**63 - 1


def _is_storable_id(task_id: int) -> bool:
    return -_MAX_ROWID - 1 <= int(task_id) <= _MAX_ROWID


class TaskStore:
    """
    SQLite task store.

    The table layout matches the one written by the Qt version of qtodo
    (columns `task` and `alerted`), so an existing todo.db opens as-is:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Durability:
    - each method opens its own SQLite connection
    - every mutation commits before returning (synchronous=FULL)

    Any sqlite3.Error is re-raised as StorageError.
    """

    def __init__(self, db_path: str | Path = "todo.db") -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"cannot create directory for {self._db_path}: {e}") from e
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    @contextlib.contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn: sqlite3.Connection | None = None
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=30.0)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA synchronous=FULL")
            yield conn
        except sqlite3.Error as e:
            raise StorageError(f"{self._db_path}: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    task TEXT,
                    due_date TEXT,
                    alarm_time TEXT,
                    alerted INTEGER DEFAULT 0
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("task", "TEXT")
            add_col("due_date", "TEXT")
            add_col("alarm_time", "TEXT")
            add_col("alerted", "INTEGER DEFAULT 0")

            conn.commit()

    def _row_to_task(self, row: sqlite3.Row) -> Task | None:
        try:
            return Task(
                id=int(row["id"]),
                name=str(row["task"] or ""),
                due_date=parse_date(str(row["due_date"] or "")),
                alarm_time=parse_time(str(row["alarm_time"] or "")),
                acknowledged=bool(row["alerted"]),
            )
        except ValueError:
            logger.warning(
                "Skipping malformed task row id=%s due_date=%r alarm_time=%r",
                row["id"],
                row["due_date"],
                row["alarm_time"],
            )
            return None

    def _update_columns(self, task_id: int, fields: dict[str, Any]) -> None:
        if not _is_storable_id(task_id):
            raise TaskNotFound(task_id)
        if not fields:
            with self._connect() as conn:
                row = conn.execute("SELECT 1 FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
            if row is None:
                raise TaskNotFound(task_id)
            return

        assignments = ", ".join(f"{col} = ?" for col in fields)
        params = [*fields.values(), int(task_id)]

        with self._connect() as conn:
            cur = conn.execute(f"UPDATE tasks SET {assignments} WHERE id = ?", params)
            conn.commit()
            if cur.rowcount == 0:
                raise TaskNotFound(task_id)
        logger.debug("Task updated id=%s fields=%s", task_id, ",".join(fields))

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._connect() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)

    def add(self, name: str, due_date: date, alarm_time: time) -> int:
        with self._connect() as conn:
            cur = conn.execute(
                "INSERT INTO tasks (task, due_date, alarm_time, alerted) VALUES (?, ?, ?, 0)",
                (name, format_date(due_date), format_time(alarm_time)),
            )
            conn.commit()
            rowid = cur.lastrowid
        if rowid is None:
            raise StorageError("SQLite did not return lastrowid for tasks insert")
        task_id = int(rowid)
        logger.debug("Task added id=%s due=%s %s", task_id, due_date, alarm_time)
        return task_id

    def get(self, task_id: int) -> Task | None:
        if not _is_storable_id(task_id):
            return None
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, task, due_date, alarm_time, alerted FROM tasks WHERE id = ?",
                (int(task_id),),
            ).fetchone()
        return self._row_to_task(row) if row else None

    def list_all(self) -> list[Task]:
        """Every task in insertion order. Malformed rows are skipped."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, task, due_date, alarm_time, alerted FROM tasks ORDER BY id ASC"
            ).fetchall()
        tasks = (self._row_to_task(r) for r in rows)
        return [t for t in tasks if t is not None]

    def update_name(self, task_id: int, name: str) -> None:
        self._update_columns(task_id, {"task": name})

    def update_due_date(self, task_id: int, due_date: date) -> None:
        self._update_columns(task_id, {"due_date": format_date(due_date)})

    def update_alarm_time(self, task_id: int, alarm_time: time) -> None:
        self._update_columns(task_id, {"alarm_time": format_time(alarm_time)})

    def update_task(
        self,
        task_id: int,
        *,
        name: str | None = None,
        due_date: date | None = None,
        alarm_time: time | None = None,
    ) -> None:
        """Update any subset of the editable fields in one statement."""
        fields: dict[str, Any] = {}
        if name is not None:
            fields["task"] = name
        if due_date is not None:
            fields["due_date"] = format_date(due_date)
        if alarm_time is not None:
            fields["alarm_time"] = format_time(alarm_time)
        self._update_columns(task_id, fields)

    def delete(self, task_id: int) -> bool:
        """Remove the task. Returns False (and does nothing) if it did not exist."""
        if not _is_storable_id(task_id):
            return False
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
        if cur.rowcount:
            logger.debug("Task deleted id=%s", task_id)
        return cur.rowcount > 0

    def set_acknowledged(self, task_id: int, value: bool) -> None:
        self._update_columns(task_id, {"alerted": 1 if value else 0})

    def get_acknowledged(self, task_id: int) -> bool:
        if not _is_storable_id(task_id):
            return False
        with self._connect() as conn:
            row = conn.execute("SELECT alerted FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
        return bool(row["alerted"]) if row else False
