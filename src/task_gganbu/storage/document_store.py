# src/task_gganbu/storage/document_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
DAILY_SCORE_KEY = "dailyScore"


class DocumentStore:
    """
    SQLite key/value store of JSON documents.

    Mirrors a browser's local storage: a handful of named documents, each
    rewritten whole on every change (write-through, no batching).

    Failure policy:
    - load() on a missing key or unparsable value -> None
    - save()/delete() never raise; they log and return False
    - an unopenable or corrupt database file leaves the store unavailable:
      every load reads as absent and every save/delete reports False

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "gganbu.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._available = False
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
            self._available = True
        except (sqlite3.Error, OSError):
            logger.exception("DocumentStore unavailable db=%s; running without persistence.", self._db_path)
            return

        try:
            keys = self.keys()
        except sqlite3.Error:
            keys = []
        logger.info("DocumentStore ready db=%s keys=%s", self._db_path, keys)

    @property
    def path(self) -> Path:
        return self._db_path

    @property
    def available(self) -> bool:
        """False when the database could not be opened; loads then read as absent and saves fail."""
        return self._available

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def keys(self) -> list[str]:
        if not self._available:
            return []
        conn = self._get_conn()
        try:
            cur = conn.execute("SELECT key FROM documents ORDER BY key")
            return [str(r["key"]) for r in cur.fetchall()]
        finally:
            conn.close()

    def load(self, key: str) -> Any | None:
        if not self._available:
            return None
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM documents WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error:
            logger.exception("Failed to read document key=%s", key)
            return None

        if row is None:
            return None

        raw = row["value"]
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Document key=%s is not valid JSON; treating as absent.", key)
            return None

    def save(self, key: str, value: Any) -> bool:
        if not self._available:
            return False
        try:
            raw = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            logger.exception("Failed to JSON-encode document key=%s", key)
            return False

        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO documents(key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, raw, time.time()),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error:
            logger.exception("Failed to save document key=%s", key)
            return False

        logger.debug("Saved document key=%s bytes=%d", key, len(raw))
        return True

    def delete(self, key: str) -> bool:
        if not self._available:
            return False
        try:
            conn = self._get_conn()
            try:
                conn.execute("DELETE FROM documents WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error:
            logger.exception("Failed to delete document key=%s", key)
            return False
        logger.debug("Deleted document key=%s", key)
        return True
