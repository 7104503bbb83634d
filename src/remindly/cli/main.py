# src/remindly/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, asks for notification permission once,
restores saved tasks (re-arming future reminders), then runs the console REPL
on a single asyncio event loop.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, request_notification_permission
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.task_api import restore_tasks

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.scheduler.cancel_all()
    except Exception:
        logger.debug("Scheduler cancel failed.", exc_info=True)


async def _run(state: AppState) -> None:
    # Timers need the running loop, so restore happens in here.
    restore_tasks(state)
    try:
        await run_console_loop(state)
    finally:
        _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    request_notification_permission(state)

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
