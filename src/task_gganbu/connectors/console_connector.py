# src/task_gganbu/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from datetime import datetime

from ..cli.commands import quick_add
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)

_EOF = object()


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleFeedback:
    """CompletionFeedback for the terminal: a bell and a 'tallag!' line."""

    def __init__(self, *, bell: bool = True) -> None:
        self.bell = bell

    def task_completed(self, task: Task, score: int) -> None:
        if self.bell and sys.stdout.isatty():
            sys.stdout.write("\a")
        _print_ts(f"*** tallag! *** '{task.text}' done (+{task.points}). Daily score: {score}")


def _start_stdin_reader(
    loop: asyncio.AbstractEventLoop,
    lines: asyncio.Queue[object],
    ready: threading.Event,
) -> threading.Thread:
    """
    Read console lines on a daemon thread and hand them to the event loop.

    The reader waits for `ready` before prompting again so replies print
    before the next prompt. Being a daemon, it never blocks shutdown.
    """

    def _run() -> None:
        while True:
            ready.wait()
            ready.clear()
            try:
                line: object = input(">>> ")
            except (EOFError, KeyboardInterrupt):
                line = _EOF
            loop.call_soon_threadsafe(lines.put_nowait, line)
            if line is _EOF:
                return

    t = threading.Thread(target=_run, name="console-stdin", daemon=True)
    t.start()
    return t


def handle_line(state: AppState, user_input: str) -> str | None:
    """One console line -> reply text (None for blank input)."""
    if not user_input:
        return None

    def emit(text: str) -> None:
        _print_ts(text)

    if user_input.startswith("/"):
        return command_registry.handle(state, user_input, emit=emit)
    return quick_add(state, user_input)


async def run_console_loop(state: AppState) -> None:
    """
    Console connector.

    Commands run on the event loop (same thread as the fire timers and the
    rollover watch), so the engine is never touched concurrently.
    """
    app_name = str(getattr(state.settings, "app_name", "Task Gganbu"))
    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands, /exit to quit.\n")

    loop = asyncio.get_running_loop()
    lines: asyncio.Queue[object] = asyncio.Queue()
    ready = threading.Event()
    _start_stdin_reader(loop, lines, ready)

    while True:
        ready.set()
        raw = await lines.get()
        if raw is _EOF:
            logger.info("Console EOF received, exiting.")
            print()
            break

        user_input = str(raw).strip()
        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = handle_line(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            _print_ts(reply)

        # Let a due shot resolve before the next prompt shows up.
        await asyncio.sleep(0)

    logger.info("Console connector finished.")
