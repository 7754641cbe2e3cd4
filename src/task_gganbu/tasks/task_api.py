# src/task_gganbu/tasks/task_api.py

from __future__ import annotations

import logging

from ..core.state import AppState
from ..storage.document_store import DAILY_SCORE_KEY, TASKS_KEY

logger = logging.getLogger(__name__)


def wipe_all_data(state: AppState) -> None:
    """
    Destructive: drop every task and today's score.

    Confirmation is the caller's job (the console wants "/wipe confirm").
    """
    state.store.delete(TASKS_KEY)
    state.store.delete(DAILY_SCORE_KEY)
    state.registry.wipe()
    state.score.reset()
    logger.warning("All stored data wiped.")
