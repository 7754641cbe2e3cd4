# src/task_gganbu/game/aim_fire.py

from __future__ import annotations

"""
Aim / fire controller.

Two states:
- IDLE:   pointer moves update the aim; a fire trigger schedules a shot
- FIRING: a shot is in flight; further triggers are ignored

The shot resolves fire_delay_seconds after the trigger, against the aim
position current at resolution time (the pointer may keep moving while
the laser travels). Resolution always returns the controller to IDLE.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from ..core.ports import Clock, CompletionFeedback, Scheduler, TimerHandle
from ..core.timers import display_timestamp
from ..score.score_tracker import ScoreTracker
from ..tasks.task_models import Task
from ..tasks.task_registry import TaskRegistry

logger = logging.getLogger(__name__)

DEFAULT_FIRE_DELAY_SECONDS = 0.5
DEFAULT_HIT_RADIUS = 10.0
DEFAULT_AIM_POSITION = 50.0


class FireState(str, Enum):
    IDLE = "idle"
    FIRING = "firing"


@dataclass(slots=True, frozen=True)
class Surface:
    """Horizontal extent of the track on screen, in pointer coordinates."""

    left: float
    width: float


@dataclass(slots=True, frozen=True)
class ShotResult:
    aim: float
    hit: Task | None
    score: int | None

    @property
    def points(self) -> int:
        return self.hit.points if self.hit is not None else 0


def normalize_pointer(client_x: float, surface: Surface) -> float | None:
    """Pointer x as a percentage of the surface width. Not clamped."""
    if surface.width <= 0:
        return None
    return (client_x - surface.left) / surface.width * 100.0


class AimFireController:
    def __init__(
        self,
        registry: TaskRegistry,
        score: ScoreTracker,
        *,
        scheduler: Scheduler,
        clock: Clock,
        feedback: CompletionFeedback | None = None,
        fire_delay_seconds: float = DEFAULT_FIRE_DELAY_SECONDS,
        hit_radius: float = DEFAULT_HIT_RADIUS,
    ) -> None:
        self._registry = registry
        self._score = score
        self._scheduler = scheduler
        self._clock = clock
        self._feedback = feedback
        self.fire_delay_seconds = float(fire_delay_seconds)
        self.hit_radius = float(hit_radius)

        self.state = FireState.IDLE
        self.aim_position = DEFAULT_AIM_POSITION
        self.last_result: ShotResult | None = None
        self._pending: TimerHandle | None = None

    @property
    def firing(self) -> bool:
        return self.state == FireState.FIRING

    def aim_at(self, position: float) -> None:
        self.aim_position = float(position)

    def pointer_move(self, client_x: float, surface: Surface) -> None:
        position = normalize_pointer(client_x, surface)
        if position is None:
            return
        self.aim_position = position

    def fire(self) -> bool:
        """Trigger a shot. Returns False when one is already in flight."""
        if self.state == FireState.FIRING:
            logger.debug("Fire ignored: shot already in flight.")
            return False

        self.state = FireState.FIRING
        self._pending = self._scheduler.call_later(self.fire_delay_seconds, self._resolve)
        logger.debug("Fired at aim=%.2f (resolves in %.2fs)", self.aim_position, self.fire_delay_seconds)
        return True

    def cancel(self) -> bool:
        """Drop the in-flight shot without resolving it."""
        if self.state != FireState.FIRING:
            return False
        if self._pending is not None:
            self._pending.cancel()
        self._pending = None
        self.state = FireState.IDLE
        logger.debug("In-flight shot cancelled.")
        return True

    def _resolve(self) -> None:
        aim = self.aim_position
        self._pending = None
        try:
            hit = self._registry.find_hit(aim, self.hit_radius)
            if hit is None:
                logger.debug("Shot at %.2f missed.", aim)
                self.last_result = ShotResult(aim=aim, hit=None, score=None)
                return

            completed_at = display_timestamp(self._clock.now())
            if not self._registry.complete(hit.id, completed_at):
                self.last_result = ShotResult(aim=aim, hit=None, score=None)
                return

            record = self._score.add_points(hit.points)
            self.last_result = ShotResult(aim=aim, hit=hit, score=record.score)
            logger.info("Shot at %.2f hit task id=%s (+%s)", aim, hit.id, hit.points)

            if self._feedback is not None:
                try:
                    self._feedback.task_completed(hit, record.score)
                except Exception:
                    logger.exception("Completion feedback failed task_id=%s", hit.id)
        finally:
            self.state = FireState.IDLE
