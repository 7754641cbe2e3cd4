# src/task_gganbu/score/score_tracker.py

from __future__ import annotations

"""
Daily score.

The record belongs to one calendar day. A record dated any other day is
stale and reads as zero for today. Two paths keep that true:
- run_rollover_watch polls check_rollover on an interval (eager)
- add_points/current heal a stale record on the spot (lazy)

Both paths end in the same state, so a rollover landing between a fire
and its resolution still credits today's record.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..core.ports import Clock, DocumentRepo
from ..core.timers import day_id
from ..storage.document_store import DAILY_SCORE_KEY

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DailyScore:
    date: str
    score: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "score": self.score}

    @classmethod
    def from_document(cls, doc: Any, *, today: str) -> DailyScore:
        """Decode the stored record; anything unusable becomes a fresh record for today."""
        if not isinstance(doc, dict):
            return cls(date=today, score=0)
        date = doc.get("date")
        score = doc.get("score")
        if not isinstance(date, str) or not date:
            return cls(date=today, score=0)
        if isinstance(score, bool) or not isinstance(score, int) or score < 0:
            return cls(date=today, score=0)
        return cls(date=date, score=score)


class ScoreTracker:
    def __init__(self, store: DocumentRepo, *, clock: Clock) -> None:
        self._store = store
        self._clock = clock
        self._record = DailyScore.from_document(store.load(DAILY_SCORE_KEY), today=self._today())
        logger.info("ScoreTracker loaded date=%s score=%s", self._record.date, self._record.score)

    def _today(self, now: datetime | None = None) -> str:
        return day_id(now or self._clock.now())

    @property
    def record(self) -> DailyScore:
        """Stored record as-is (may be stale). Use current() for reads."""
        return DailyScore(date=self._record.date, score=self._record.score)

    def current(self) -> DailyScore:
        self.check_rollover()
        return self.record

    def check_rollover(self, now: datetime | None = None) -> bool:
        today = self._today(now)
        if self._record.date == today:
            return False
        logger.info(
            "Daily score rollover %s (score=%s) -> %s",
            self._record.date,
            self._record.score,
            today,
        )
        self._record = DailyScore(date=today, score=0)
        self._persist()
        return True

    def add_points(self, n: int) -> DailyScore:
        today = self._today()
        if self._record.date == today:
            self._record.score += int(n)
        else:
            self._record = DailyScore(date=today, score=int(n))
        self._persist()
        logger.info("Daily score %s -> %s (+%s)", today, self._record.score, n)
        return self.record

    def reset(self) -> None:
        self._record = DailyScore(date=self._today(), score=0)
        self._persist()
        logger.info("Daily score reset.")

    def _persist(self) -> None:
        if not self._store.save(DAILY_SCORE_KEY, self._record.to_dict()):
            logger.warning("Daily score not persisted; keeping in-memory state.")


async def run_rollover_watch(
        tracker: ScoreTracker,
        *,
        interval_seconds: float = 60.0,
) -> None:
    """
    Poll tracker.check_rollover() now and then every interval_seconds.

    To stop the watch, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))
    logger.debug("Rollover watch started interval=%.2fs", sleep_s)

    while True:
        try:
            tracker.check_rollover()
        except Exception:
            logger.exception("check_rollover failed")

        await asyncio.sleep(sleep_s)
