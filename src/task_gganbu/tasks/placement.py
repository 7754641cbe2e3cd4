# src/task_gganbu/tasks/placement.py

"""
Placement of new tasks on the 0-100 track.

Candidates are random multiples of the grid size; a candidate is free when
every existing position (completed tasks included) is at least one grid
size away. When the attempt budget runs out we fall back to a random spot
in [10, 90) and accept the overlap, so creating a task never fails.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Iterable

logger = logging.getLogger(__name__)

TRACK_LENGTH = 100.0
DEFAULT_GRID_SIZE = 10.0
DEFAULT_MAX_ATTEMPTS = 100
FALLBACK_LOW = 10.0
FALLBACK_SPAN = 80.0


class PlacementAllocator:
    def __init__(
        self,
        *,
        grid_size: float = DEFAULT_GRID_SIZE,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        rng: random.Random | None = None,
    ) -> None:
        if grid_size <= 0:
            raise ValueError("grid_size must be positive")
        self.grid_size = float(grid_size)
        self.max_attempts = max(1, int(max_attempts))
        self._rng = rng or random.Random()

    @property
    def slot_count(self) -> int:
        return int(TRACK_LENGTH // self.grid_size)

    def is_free(self, candidate: float, positions: Iterable[float]) -> bool:
        # Exactly one grid size apart counts as free.
        return all(abs(p - candidate) >= self.grid_size for p in positions)

    def allocate(self, positions: Iterable[float]) -> float:
        taken = list(positions)
        slots = self.slot_count

        for _ in range(self.max_attempts):
            candidate = math.floor(self._rng.random() * slots) * self.grid_size
            if self.is_free(candidate, taken):
                return float(candidate)

        fallback = self._rng.random() * FALLBACK_SPAN + FALLBACK_LOW
        logger.info(
            "No free slot after %d attempts (taken=%d); falling back to %.2f",
            self.max_attempts,
            len(taken),
            fallback,
        )
        return fallback
