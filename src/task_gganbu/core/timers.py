# src/task_gganbu/core/timers.py

"""Concrete clock and scheduler backed by the running asyncio loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime

from .ports import TimerHandle


class SystemClock:
    def now(self) -> datetime:
        return datetime.now().astimezone()


class AsyncioScheduler:
    """
    Scheduler port over loop.call_later.

    The loop is resolved lazily so the object can be built before asyncio.run().
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, float(delay_seconds)), callback)


DAY_ID_FORMAT = "%a %b %d %Y"
DISPLAY_TS_FORMAT = "%Y-%m-%d %H:%M:%S"


def day_id(moment: datetime) -> str:
    """Calendar-day identifier in local time, e.g. 'Tue Jan 02 2024'."""
    return moment.strftime(DAY_ID_FORMAT)


def display_timestamp(moment: datetime) -> str:
    return moment.strftime(DISPLAY_TS_FORMAT)
