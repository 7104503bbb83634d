# src/remindly/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


async def _read_line(prompt: str) -> str:
    """
    input() on a daemon thread, result handed back to the loop.
    A pending prompt must not block interpreter exit.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def _deliver(line: str | None, exc: BaseException | None) -> None:
        if fut.done():
            return
        if exc is not None:
            fut.set_exception(exc)
        else:
            fut.set_result(line or "")

    def _reader() -> None:
        try:
            line = input(prompt)
        except Exception as e:
            loop.call_soon_threadsafe(_deliver, None, e)
            return
        loop.call_soon_threadsafe(_deliver, line, None)

    threading.Thread(target=_reader, name="console-input", daemon=True).start()
    return await fut


async def run_console_loop(state: AppState) -> None:
    """
    Console REPL on the event loop.

    input() runs off the loop thread so reminder timers keep firing while the
    prompt waits; command handling itself stays on the loop thread.
    """
    app_name = str(getattr(state.settings, "app_name", "Remindly"))
    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = (await _read_line(">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Use /help to list them."
        _print_ts(reply)

    logger.info("Console connector finished.")
