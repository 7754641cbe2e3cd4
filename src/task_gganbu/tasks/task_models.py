# src/task_gganbu/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

VALID_POINTS: frozenset[int] = frozenset({1, 2, 3, 4})

# Renderers pick the icon from the points value.
POINT_ICONS: dict[int, str] = {
    1: "circle",
    2: "triangle",
    3: "star",
    4: "umbrella",
}


class Category(StrEnum):
    ADMIN = "admin"
    PREP = "prep"
    TEACH = "teach"

    @classmethod
    def parse(cls, raw: str | None) -> Category | None:
        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(slots=True)
class Task:
    """
    One tracked task.

    position is assigned once at creation and never recomputed.
    completed is None while the task is active; once set it never changes.
    """

    id: int
    text: str
    timestamp: str
    category: Category
    points: int
    notes: str
    position: float
    completed: str | None = None

    @property
    def active(self) -> bool:
        return self.completed is None

    @property
    def icon(self) -> str:
        return POINT_ICONS.get(self.points, POINT_ICONS[1])

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "timestamp": self.timestamp,
            "category": self.category.value,
            "points": self.points,
            "notes": self.notes,
            "position": self.position,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        """Rebuild a Task from its stored shape. Raises ValueError on malformed input."""
        if not isinstance(raw, dict):
            raise ValueError("task record must be an object")

        category = Category.parse(raw.get("category"))
        if category is None:
            raise ValueError(f"unknown category {raw.get('category')!r}")

        points = raw.get("points")
        if isinstance(points, bool) or not isinstance(points, int) or points not in VALID_POINTS:
            raise ValueError(f"invalid points {points!r}")

        text = raw.get("text")
        if not isinstance(text, str) or not text.strip():
            raise ValueError("task text is required")

        position = raw.get("position")
        if isinstance(position, bool) or not isinstance(position, (int, float)):
            raise ValueError(f"invalid position {position!r}")

        task_id = raw.get("id")
        if isinstance(task_id, bool) or not isinstance(task_id, int):
            raise ValueError(f"invalid id {task_id!r}")

        completed = raw.get("completed")
        if completed is not None and not isinstance(completed, str):
            raise ValueError(f"invalid completed {completed!r}")

        return cls(
            id=task_id,
            text=text,
            timestamp=str(raw.get("timestamp") or ""),
            category=category,
            points=points,
            notes=str(raw.get("notes") or ""),
            position=float(position),
            completed=completed or None,
        )
