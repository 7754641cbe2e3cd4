# tests/conftest.py

from __future__ import annotations

import random
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from task_gganbu.cli.bootstrap import create_initial_state
from task_gganbu.core.state import AppState
from task_gganbu.storage.document_store import DocumentStore

from .fakes import FakeClock, ManualScheduler, RecordingFeedback

# A Tuesday; the day before is "Mon Jan 01 2024".
TODAY = datetime(2024, 1, 2, 9, 30, 0)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="Task Gganbu (test)",
        log_level="DEBUG",
        data_dir=tmp_path,
        store_path=tmp_path / "gganbu.sqlite3",
        export_dir=tmp_path / "exports",
        grid_size=10.0,
        max_placement_attempts=100,
        hit_radius=10.0,
        fire_delay_seconds=0.5,
        rollover_interval_seconds=60.0,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(TODAY)


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def feedback() -> RecordingFeedback:
    return RecordingFeedback()


@pytest.fixture()
def store(settings: SimpleNamespace) -> DocumentStore:
    return DocumentStore(settings.store_path)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    store: DocumentStore,
    clock: FakeClock,
    scheduler: ManualScheduler,
    feedback: RecordingFeedback,
) -> AppState:
    """
    AppState wired with deterministic fakes.

    NOTE: We keep the real SQLite DocumentStore here because persistence
    is part of what we want to test.
    """
    return create_initial_state(
        settings=settings,
        store=store,
        clock=clock,
        scheduler=scheduler,
        feedback=feedback,
        rng=random.Random(1234),
    )
