# src/task_gganbu/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the document store, clock, timers and game engine into AppState.
"""

from __future__ import annotations

import logging
import random

from ..config import get_settings
from ..core.ports import Clock, CompletionFeedback, DocumentRepo, Scheduler
from ..core.state import AppState
from ..core.timers import AsyncioScheduler, SystemClock
from ..game.aim_fire import AimFireController
from ..score.score_tracker import ScoreTracker
from ..storage.document_store import DocumentStore
from ..tasks.placement import PlacementAllocator
from ..tasks.task_registry import TaskRegistry

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    # The store degrades on its own if its directory is missing.
    try:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        settings.store_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        logger.exception("Failed to create local data dirs under %s", settings.data_dir)


def create_initial_state(
    *,
    settings=None,
    store: DocumentRepo | None = None,
    clock: Clock | None = None,
    scheduler: Scheduler | None = None,
    feedback: CompletionFeedback | None = None,
    rng: random.Random | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Every collaborator is injectable so tests can pin the clock, drive the
    timers by hand and use a throwaway store. If settings is None, falls
    back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if store is None:
        _ensure_local_dirs(settings)
        store = DocumentStore(settings.store_path)

    clock = clock or SystemClock()
    scheduler = scheduler or AsyncioScheduler()

    allocator = PlacementAllocator(
        grid_size=settings.grid_size,
        max_attempts=settings.max_placement_attempts,
        rng=rng,
    )
    registry = TaskRegistry(store, allocator=allocator, clock=clock)
    score = ScoreTracker(store, clock=clock)
    controller = AimFireController(
        registry,
        score,
        scheduler=scheduler,
        clock=clock,
        feedback=feedback,
        fire_delay_seconds=settings.fire_delay_seconds,
        hit_radius=settings.hit_radius,
    )

    return AppState(
        settings=settings,
        store=store,
        clock=clock,
        registry=registry,
        score=score,
        controller=controller,
    )
