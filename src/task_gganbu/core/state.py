# src/task_gganbu/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..game.aim_fire import AimFireController
from ..score.score_tracker import ScoreTracker
from ..tasks.task_registry import TaskRegistry
from .ports import Clock, DocumentRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    store: DocumentRepo
    clock: Clock
    registry: TaskRegistry
    score: ScoreTracker
    controller: AimFireController
