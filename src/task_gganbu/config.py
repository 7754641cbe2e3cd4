# src/task_gganbu/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every consumer also accepts injected settings (tests use a SimpleNamespace).
- Bad values never crash startup: they fall back to defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "GGANBU"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_path: Path
    export_dir: Path

    # ---- Track / gameplay ----
    grid_size: float
    max_placement_attempts: int
    hit_radius: float

    # ---- Timers (seconds) ----
    fire_delay_seconds: float
    rollover_interval_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "Task Gganbu").strip() or "Task Gganbu"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/gganbu"))
        store_path = _env_path(_k("STORE_PATH"), data_dir / "gganbu.sqlite3")
        export_dir = _env_path(_k("EXPORT_DIR"), data_dir / "exports")

        grid_size = _env_float(_k("GRID_SIZE"), 10.0)
        if grid_size <= 0:
            grid_size = 10.0
        max_placement_attempts = max(1, _env_int(_k("MAX_PLACEMENT_ATTEMPTS"), 100))
        hit_radius = _env_float(_k("HIT_RADIUS"), 10.0)

        fire_delay_seconds = max(0.0, _env_float(_k("FIRE_DELAY_SECONDS"), 0.5))
        # Any interval shorter than a day keeps the score correct.
        rollover_interval_seconds = _env_float(_k("ROLLOVER_INTERVAL_SECONDS"), 60.0)
        if not 0 < rollover_interval_seconds < 86400:
            rollover_interval_seconds = 60.0

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_path=store_path,
            export_dir=export_dir,
            grid_size=grid_size,
            max_placement_attempts=max_placement_attempts,
            hit_radius=hit_radius,
            fire_delay_seconds=fire_delay_seconds,
            rollover_interval_seconds=rollover_interval_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
