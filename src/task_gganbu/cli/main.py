# src/task_gganbu/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs on one asyncio loop:
- the daily-score rollover watch as a background task,
- the console connector in the foreground.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import ConsoleFeedback, run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..score.score_tracker import run_rollover_watch

logger = logging.getLogger(__name__)


async def run_app(state: AppState) -> None:
    interval = float(getattr(state.settings, "rollover_interval_seconds", 60.0))
    watch = asyncio.create_task(
        run_rollover_watch(state.score, interval_seconds=interval),
        name="rollover-watch",
    )
    try:
        await run_console_loop(state)
    finally:
        watch.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watch

    # A shot still in flight is allowed to land before the loop closes.
    if state.controller.firing:
        await asyncio.sleep(state.controller.fire_delay_seconds)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings, feedback=ConsoleFeedback())

    try:
        asyncio.run(run_app(state))
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt, shutting down...")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
