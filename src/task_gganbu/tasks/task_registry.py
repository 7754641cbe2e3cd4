# src/task_gganbu/tasks/task_registry.py

from __future__ import annotations

import logging
from typing import Any

from ..core.ports import Clock, DocumentRepo
from ..core.timers import display_timestamp
from ..storage.document_store import TASKS_KEY
from .placement import PlacementAllocator
from .task_models import VALID_POINTS, Category, Task

logger = logging.getLogger(__name__)


def tasks_from_document(doc: Any) -> list[Task]:
    """
    Decode the stored task list.

    Anything that is not a list decodes as empty; malformed entries are
    skipped so one bad record does not lose the rest of the collection.
    """
    if doc is None:
        return []
    if not isinstance(doc, list):
        logger.warning("Stored tasks document is not a list; starting empty.")
        return []

    out: list[Task] = []
    for index, raw in enumerate(doc):
        try:
            out.append(Task.from_dict(raw))
        except ValueError as e:
            logger.warning("Skipping stored task #%d: %s", index, e)
    return out


def tasks_to_document(tasks: list[Task]) -> list[dict[str, Any]]:
    return [t.to_dict() for t in tasks]


class TaskRegistry:
    """
    In-memory task collection with write-through persistence.

    Every mutation saves the whole collection under TASKS_KEY immediately.
    Collection order is insertion order and is what find_hit scans.
    """

    def __init__(
        self,
        store: DocumentRepo,
        *,
        allocator: PlacementAllocator,
        clock: Clock,
    ) -> None:
        self._store = store
        self._allocator = allocator
        self._clock = clock
        self._tasks: list[Task] = tasks_from_document(store.load(TASKS_KEY))
        logger.info(
            "TaskRegistry loaded total=%d active=%d",
            len(self._tasks),
            len(self.active_tasks()),
        )

    # ---- queries ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def active_tasks(self) -> list[Task]:
        return [t for t in self._tasks if t.active]

    def get(self, task_id: int) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def find_hit(self, aim_position: float, hit_radius: float) -> Task | None:
        """First active task in collection order within hit_radius (strict)."""
        for t in self._tasks:
            if t.active and abs(t.position - aim_position) < hit_radius:
                return t
        return None

    # ---- mutations ----

    def insert(
        self,
        text: str,
        category: Category | str,
        points: int,
        notes: str = "",
    ) -> Task | None:
        if not text or not text.strip():
            logger.debug("Rejected task with empty text.")
            return None

        cat = category if isinstance(category, Category) else Category.parse(category)
        if cat is None:
            logger.debug("Rejected task with unknown category %r.", category)
            return None

        if isinstance(points, bool) or points not in VALID_POINTS:
            logger.debug("Rejected task with invalid points %r.", points)
            return None

        now = self._clock.now()
        position = self._allocator.allocate(t.position for t in self._tasks)

        task = Task(
            id=self._next_id(int(now.timestamp() * 1000)),
            text=text,
            timestamp=display_timestamp(now),
            category=cat,
            points=int(points),
            notes=notes or "",
            position=position,
            completed=None,
        )
        self._tasks.append(task)
        self._persist()
        logger.info(
            "Task added id=%s category=%s points=%s position=%.2f",
            task.id,
            task.category.value,
            task.points,
            task.position,
        )
        return task

    def complete(self, task_id: int, completion_timestamp: str) -> bool:
        task = self.get(task_id)
        if task is None:
            logger.warning("complete: unknown task id=%s", task_id)
            return False
        if not task.active:
            logger.warning("complete: task id=%s already completed at %s", task_id, task.completed)
            return False

        task.completed = completion_timestamp
        self._persist()
        logger.info("Task completed id=%s at %s", task_id, completion_timestamp)
        return True

    def wipe(self) -> None:
        self._tasks.clear()
        self._persist()
        logger.info("Task collection wiped.")

    # ---- internals ----

    def _next_id(self, candidate: int) -> int:
        if self._tasks:
            highest = max(t.id for t in self._tasks)
            if candidate <= highest:
                return highest + 1
        return candidate

    def _persist(self) -> None:
        if not self._store.save(TASKS_KEY, tasks_to_document(self._tasks)):
            logger.warning("Tasks not persisted; keeping in-memory state.")
