# src/qtodo/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
import threading
from collections.abc import Callable
from datetime import datetime
from typing import BinaryIO

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.due_evaluator import DueTask
from ..tasks.task_models import format_date, format_time

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleAlarm:
    """
    DueTaskListener that alerts on the terminal.

    The first report for a task prints the full alert line. While the task
    stays unacknowledged, the due checker keeps reporting it and each later
    report prints a short reminder instead. Both ring the bell.
    `silence()` forgets the task once the user acknowledges, deletes or
    reschedules it, so a later report is announced in full again.
    """

    def __init__(self, *, bell: bool = True, emit: Callable[[str], None] | None = None) -> None:
        self.bell = bell
        self._emit = emit or _print_ts
        self._ringing: set[int] = set()

    @property
    def ringing(self) -> frozenset[int]:
        return frozenset(self._ringing)

    async def on_task_due(self, due: DueTask) -> None:
        if due.task_id in self._ringing:
            self._emit(f"[ALARM] Task #{due.task_id} is still due. Use /ack {due.task_id}.")
        else:
            logger.info("Task %s is due (%s)", due.task_id, due.due_at.isoformat(timespec="minutes"))
            self._ringing.add(due.task_id)
            when = f"{format_date(due.due_at.date())} {format_time(due.due_at.time())}"
            self._emit(f"[ALARM] Task #{due.task_id} \"{due.name}\" was due at {when}. Use /ack {due.task_id}.")
        self._ring()

    def _ring(self) -> None:
        if self.bell:
            sys.stdout.write("\a")
            sys.stdout.flush()

    def silence(self, task_id: int) -> None:
        if task_id in self._ringing:
            self._ringing.discard(task_id)
            logger.debug("Alarm silenced task_id=%s", task_id)


def _start_stdin_reader(
    loop: asyncio.AbstractEventLoop,
    queue: asyncio.Queue[str | None],
    stream: BinaryIO | None = None,
    encoding: str | None = None,
) -> threading.Thread:
    """
    Feed input lines into `queue` from a daemon thread.

    Only the blocking read happens off the loop; commands (and the store)
    stay on the event-loop thread. Lines are read as bytes and decoded with
    replacement, so undecodable input reaches the command parser instead of
    killing the reader. None always marks end of input.
    """
    if stream is None:
        stream = sys.stdin.buffer
    encoding = encoding or getattr(sys.stdin, "encoding", None) or "utf-8"

    def _put(item: str | None) -> None:
        # The loop may already be closed during shutdown.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(queue.put_nowait, item)

    def _reader() -> None:
        try:
            for raw in stream:
                _put(raw.decode(encoding, errors="replace"))
        except (OSError, ValueError):
            logger.exception("Console input failed.")
        finally:
            _put(None)

    thread = threading.Thread(target=_reader, name="stdin-reader", daemon=True)
    thread.start()
    return thread


async def run_console_loop(state: AppState, *, lines: asyncio.Queue[str | None] | None = None) -> None:
    """
    Read slash commands and print replies until /exit or end of input.

    `lines` lets tests feed input; by default stdin is read in a daemon thread.
    """
    if lines is None:
        lines = asyncio.Queue()
        _start_stdin_reader(asyncio.get_running_loop(), lines)

    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Manage your tasks with slash commands. Use /help for commands, /exit to quit.")

    while True:
        raw = await lines.get()
        if raw is None:
            logger.info("Console EOF received, exiting.")
            break

        user_input = raw.strip()
        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Use /help to list available commands."

        _print_ts(reply)

    logger.info("Console connector finished.")
