# tests/test_score_tracker.py

from __future__ import annotations

import asyncio
from datetime import datetime

import pytest

from task_gganbu.core.timers import day_id
from task_gganbu.score.score_tracker import DailyScore, ScoreTracker, run_rollover_watch
from task_gganbu.storage.document_store import DAILY_SCORE_KEY

from .fakes import FakeClock, MemoryDocumentStore

MONDAY = "Mon Jan 01 2024"
TUESDAY = "Tue Jan 02 2024"


def test_day_identifier_format() -> None:
    assert day_id(datetime(2024, 1, 2, 23, 59)) == TUESDAY
    assert day_id(datetime(2024, 1, 1, 0, 0)) == MONDAY


def test_missing_record_starts_today_at_zero(clock: FakeClock) -> None:
    tracker = ScoreTracker(MemoryDocumentStore(), clock=clock)
    assert tracker.current() == DailyScore(date=TUESDAY, score=0)


def test_add_points_same_day_accumulates(clock: FakeClock) -> None:
    store = MemoryDocumentStore()
    tracker = ScoreTracker(store, clock=clock)

    tracker.add_points(2)
    tracker.add_points(3)

    assert tracker.current().score == 5
    assert store.load(DAILY_SCORE_KEY) == {"date": TUESDAY, "score": 5}


def test_stale_record_reads_as_zero(clock: FakeClock) -> None:
    store = MemoryDocumentStore({DAILY_SCORE_KEY: {"date": MONDAY, "score": 5}})
    tracker = ScoreTracker(store, clock=clock)

    assert tracker.record.date == MONDAY
    assert tracker.current() == DailyScore(date=TUESDAY, score=0)
    assert store.load(DAILY_SCORE_KEY) == {"date": TUESDAY, "score": 0}


def test_add_points_on_stale_record_equals_rollover_then_add(clock: FakeClock) -> None:
    lazy = ScoreTracker(MemoryDocumentStore({DAILY_SCORE_KEY: {"date": MONDAY, "score": 5}}), clock=clock)
    eager = ScoreTracker(MemoryDocumentStore({DAILY_SCORE_KEY: {"date": MONDAY, "score": 5}}), clock=clock)

    lazy.add_points(3)
    eager.check_rollover()
    eager.add_points(3)

    assert lazy.record == eager.record == DailyScore(date=TUESDAY, score=3)


def test_check_rollover_is_idempotent(clock: FakeClock) -> None:
    store = MemoryDocumentStore({DAILY_SCORE_KEY: {"date": TUESDAY, "score": 7}})
    tracker = ScoreTracker(store, clock=clock)

    assert tracker.check_rollover() is False
    assert tracker.check_rollover() is False
    assert tracker.record.score == 7
    assert store.saves == []

    clock.advance(days=1)
    assert tracker.check_rollover() is True
    assert tracker.check_rollover() is False
    assert tracker.record == DailyScore(date="Wed Jan 03 2024", score=0)
    assert store.saves == [DAILY_SCORE_KEY]


def test_reset_zeroes_today(clock: FakeClock) -> None:
    store = MemoryDocumentStore()
    tracker = ScoreTracker(store, clock=clock)
    tracker.add_points(4)

    tracker.reset()

    assert tracker.current() == DailyScore(date=TUESDAY, score=0)
    assert store.load(DAILY_SCORE_KEY) == {"date": TUESDAY, "score": 0}


@pytest.mark.parametrize(
    "doc",
    [
        "not an object",
        {"date": TUESDAY},
        {"date": "", "score": 3},
        {"date": TUESDAY, "score": -1},
        {"date": TUESDAY, "score": "3"},
    ],
)
def test_unusable_record_defaults_to_today(clock: FakeClock, doc) -> None:
    tracker = ScoreTracker(MemoryDocumentStore({DAILY_SCORE_KEY: doc}), clock=clock)
    assert tracker.record == DailyScore(date=TUESDAY, score=0)


@pytest.mark.asyncio
async def test_rollover_watch_resets_after_midnight(clock: FakeClock) -> None:
    store = MemoryDocumentStore({DAILY_SCORE_KEY: {"date": TUESDAY, "score": 9}})
    tracker = ScoreTracker(store, clock=clock)

    runner = asyncio.create_task(run_rollover_watch(tracker, interval_seconds=0.01))

    await asyncio.sleep(0.03)
    assert tracker.record.score == 9

    clock.moment = datetime(2024, 1, 3, 0, 0, 5)
    await asyncio.sleep(0.05)

    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert tracker.record == DailyScore(date="Wed Jan 03 2024", score=0)
    assert store.load(DAILY_SCORE_KEY) == {"date": "Wed Jan 03 2024", "score": 0}
