# src/task_gganbu/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage/timers/feedback swappable and makes testing easier:
tests pin the clock and advance timers by hand instead of sleeping.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol

JsonValue = Any
# Whatever json.loads can return: dict / list / str / int / float / bool / None.


class DocumentRepo(Protocol):
    """
    Durable key/value storage of named JSON documents.

    load() returns None for a missing or unreadable document.
    save() is best-effort and reports success instead of raising.
    """

    def load(self, key: str) -> JsonValue | None: ...
    def save(self, key: str, value: JsonValue) -> bool: ...
    def delete(self, key: str) -> bool: ...


class Clock(Protocol):
    """Local wall clock. Day identifiers and display timestamps derive from it."""

    def now(self) -> datetime: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """
    Deferred callbacks on the single event loop.

    Production: asyncio loop.call_later. Tests: a manual scheduler that
    fires callbacks when advanced.
    """

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle: ...


class CompletionFeedback(Protocol):
    """Sound / visual feedback played after a shot completes a task."""

    def task_completed(self, task: Any, score: int) -> None: ...
