# src/qtodo/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs on one asyncio loop:
- the console command loop,
- the due checker (periodic tick, cancelled on shutdown).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.due_evaluator import run_due_checker
from ..tasks.errors import StorageError

logger = logging.getLogger(__name__)


async def run_app(state: AppState) -> None:
    """Run the console and the due checker until /exit, EOF or a stop signal."""
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()

    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on every platform (e.g. Windows).
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, stop.set)

    tasks: list[asyncio.Task[None]] = []
    if state.alarm is not None:
        tasks.append(
            asyncio.create_task(
                run_due_checker(
                    state.task_store,
                    state.alarm,
                    interval_seconds=float(getattr(state.settings, "check_interval_seconds", 60.0)),
                ),
                name="due-checker",
            )
        )
    console = asyncio.create_task(run_console_loop(state), name="console")
    stopper = asyncio.create_task(stop.wait(), name="stop-signal")
    tasks += [console, stopper]

    try:
        await asyncio.wait({console, stopper}, return_when=asyncio.FIRST_COMPLETED)
        if stop.is_set():
            logger.info("Stop signal received, shutting down...")
    finally:
        for t in tasks:
            t.cancel()
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for t, res in zip(tasks, results):
            if isinstance(res, Exception):
                logger.error("%s stopped with an error", t.get_name(), exc_info=res)


def main() -> int:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    try:
        state = create_initial_state(settings=settings)
    except StorageError:
        logger.critical("Cannot open task database %s", settings.tasks_db_path, exc_info=True)
        return 1

    try:
        asyncio.run(run_app(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        # TaskStore uses short-lived sqlite connections per call; close() is a no-op hook.
        close = getattr(state.task_store, "close", None)
        if callable(close):
            close()
        logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
