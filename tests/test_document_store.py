# tests/test_document_store.py

from __future__ import annotations

import random
import sqlite3
from pathlib import Path

from task_gganbu.cli.bootstrap import create_initial_state
from task_gganbu.score.score_tracker import DailyScore
from task_gganbu.storage.document_store import DocumentStore
from task_gganbu.tasks.task_models import Category


def test_save_load_delete(tmp_path: Path) -> None:
    store = DocumentStore(tmp_path / "docs.sqlite3")

    assert store.load("tasks") is None
    assert store.save("tasks", [{"id": 1, "text": "깐부"}])
    assert store.load("tasks") == [{"id": 1, "text": "깐부"}]

    assert store.save("tasks", [])
    assert store.load("tasks") == []
    assert store.keys() == ["tasks"]

    assert store.delete("tasks")
    assert store.load("tasks") is None
    assert store.keys() == []


def test_documents_survive_reopen(tmp_path: Path) -> None:
    db = tmp_path / "docs.sqlite3"
    DocumentStore(db).save("dailyScore", {"date": "Tue Jan 02 2024", "score": 4})
    assert DocumentStore(db).load("dailyScore") == {"date": "Tue Jan 02 2024", "score": 4}


def test_corrupt_value_reads_as_absent(tmp_path: Path) -> None:
    db = tmp_path / "docs.sqlite3"
    store = DocumentStore(db)

    conn = sqlite3.connect(str(db))
    conn.execute(
        "INSERT INTO documents(key, value, updated_at) VALUES (?, ?, ?)",
        ("tasks", "[{not json", 0.0),
    )
    conn.commit()
    conn.close()

    assert store.load("tasks") is None


def test_unencodable_value_is_not_saved(tmp_path: Path) -> None:
    store = DocumentStore(tmp_path / "docs.sqlite3")
    assert store.save("tasks", {"bad": object()}) is False
    assert store.load("tasks") is None


def test_garbage_database_file_degrades_to_defaults(settings, clock, scheduler) -> None:
    settings.store_path.write_bytes(b"this is not a sqlite database at all" * 50)

    state = create_initial_state(
        settings=settings,
        clock=clock,
        scheduler=scheduler,
        rng=random.Random(5),
    )

    assert not state.store.available
    assert state.registry.tasks == []
    assert state.score.current() == DailyScore(date="Tue Jan 02 2024", score=0)

    # The engine keeps working in memory; nothing reaches the broken file.
    task = state.registry.insert("still works", Category.PREP, 2)
    assert task is not None
    assert state.store.save("tasks", []) is False
    assert state.store.load("tasks") is None
    assert state.store.delete("tasks") is False
    assert state.store.keys() == []


def test_unopenable_path_is_unavailable(tmp_path: Path) -> None:
    # A directory cannot be opened as a database file.
    store = DocumentStore(tmp_path)

    assert not store.available
    assert store.load("dailyScore") is None
    assert store.save("dailyScore", {"date": "x", "score": 1}) is False
