# src/task_gganbu/tasks/export.py

"""CSV export of the full task collection."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from .task_models import Task

logger = logging.getLogger(__name__)

HEADERS = ["Task", "Category", "Points", "Created", "Completed", "Notes"]


def _row(task: Task) -> list[str]:
    return [
        task.text,
        task.category.value,
        str(task.points),
        task.timestamp,
        task.completed or "",
        task.notes,
    ]


def render_csv(tasks: Iterable[Task]) -> str:
    """Header row plus one fully quoted row per task, in collection order."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    buf.write(",".join(HEADERS) + "\n")
    for task in tasks:
        writer.writerow(_row(task))
    return buf.getvalue()


def export_filename(now: datetime) -> str:
    return f"tasks_{now.strftime('%Y-%m-%dT%H-%M-%S')}.csv"


def export_csv(tasks: Iterable[Task], directory: str | Path, *, now: datetime) -> Path:
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(now)
    content = render_csv(tasks)
    path.write_text(content, encoding="utf-8")
    logger.info("Exported tasks to %s (%d bytes)", path, len(content))
    return path
