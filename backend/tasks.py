"""Eisenhower task board — tasks classified by urgency × importance.

Quadrants:

                  important     not-important
    urgent        do            delegate
    not-urgent    schedule      eliminate

Tasks live in the key-value store under ``eisenhower.tasks`` as a JSON
list, newest first.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Optional

from storage import TASKS_KEY, KeyValueStore, load_json, persist_json

logger = logging.getLogger(__name__)

URGENCY_LEVELS = ("urgent", "not-urgent")
IMPORTANCE_LEVELS = ("important", "not-important")
PROMOTE_AXES = ("importance", "urgency")

QUADRANTS: dict[str, dict[str, str]] = {
    "do": {
        "title": "Do First",
        "description": "Critical and urgent — ship immediately.",
    },
    "schedule": {
        "title": "Schedule",
        "description": "Important but calm — plan deliberate focus blocks.",
    },
    "delegate": {
        "title": "Delegate",
        "description": "Urgent but light — hand off with clear expectations.",
    },
    "eliminate": {
        "title": "Defer / Eliminate",
        "description": "Noise — decline, delete, or archive for later.",
    },
}


class TaskNotFoundError(KeyError):
    """No task with the requested id."""


def quadrant_for(urgency: str, importance: str) -> str:
    """Map the two classification flags to a quadrant key."""
    if urgency == "urgent" and importance == "important":
        return "do"
    if urgency == "not-urgent" and importance == "important":
        return "schedule"
    if urgency == "urgent" and importance == "not-important":
        return "delegate"
    return "eliminate"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Task:
    title: str
    urgency: str = "urgent"
    importance: str = "important"
    notes: Optional[str] = None
    completed: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: str = field(default_factory=_now)

    @property
    def quadrant(self) -> str:
        return quadrant_for(self.urgency, self.importance)

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "title": self.title,
            "urgency": self.urgency,
            "importance": self.importance,
            "createdAt": self.created_at,
            "completed": self.completed,
        }
        if self.notes:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        return cls(
            id=data["id"],
            title=data["title"],
            notes=data.get("notes") or None,
            urgency=data.get("urgency", "urgent"),
            importance=data.get("importance", "important"),
            created_at=data.get("createdAt", ""),
            completed=bool(data.get("completed", False)),
        )


class TaskBoard:
    """Task CRUD over an injected key-value store."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    # ── Persistence ───────────────────────────────────────────────

    def list(self) -> list[Task]:
        raw = load_json(self._store, TASKS_KEY, [])
        if not isinstance(raw, list):
            logger.warning(f"Ignoring malformed task list under {TASKS_KEY}")
            return []
        tasks = []
        for item in raw:
            try:
                tasks.append(Task.from_dict(item))
            except (KeyError, TypeError) as e:
                logger.warning(f"Skipping malformed task record: {e}")
        return tasks

    def _save(self, tasks: list[Task]) -> None:
        persist_json(self._store, TASKS_KEY, [t.to_dict() for t in tasks])

    # ── Operations ────────────────────────────────────────────────

    def get(self, task_id: str) -> Task:
        for task in self.list():
            if task.id == task_id:
                return task
        raise TaskNotFoundError(task_id)

    def add(
        self,
        title: str,
        notes: str | None = None,
        urgency: str = "urgent",
        importance: str = "important",
    ) -> Task:
        """Create a task and put it at the top of the board."""
        title = title.strip()
        if not title:
            raise ValueError("Task title must not be blank")
        if urgency not in URGENCY_LEVELS:
            raise ValueError(f"Unknown urgency: {urgency!r}")
        if importance not in IMPORTANCE_LEVELS:
            raise ValueError(f"Unknown importance: {importance!r}")

        task = Task(
            title=title,
            notes=(notes or "").strip() or None,
            urgency=urgency,
            importance=importance,
        )
        self._save([task, *self.list()])
        logger.info(f"Added task {task.id[:8]} to {task.quadrant}")
        return task

    def _update(self, task_id: str, change) -> Task:
        tasks = self.list()
        for i, task in enumerate(tasks):
            if task.id == task_id:
                tasks[i] = change(task)
                self._save(tasks)
                return tasks[i]
        raise TaskNotFoundError(task_id)

    def toggle_complete(self, task_id: str) -> Task:
        return self._update(task_id, lambda t: replace(t, completed=not t.completed))

    def promote(self, task_id: str, axis: str) -> Task:
        """Flip the task's ``importance`` or ``urgency`` flag."""
        if axis == "importance":
            return self._update(
                task_id,
                lambda t: replace(
                    t, importance="not-important" if t.importance == "important" else "important"
                ),
            )
        if axis == "urgency":
            return self._update(
                task_id,
                lambda t: replace(t, urgency="not-urgent" if t.urgency == "urgent" else "urgent"),
            )
        raise ValueError(f"Unknown promote axis: {axis!r} (expected one of {PROMOTE_AXES})")

    def remove(self, task_id: str) -> None:
        tasks = self.list()
        remaining = [t for t in tasks if t.id != task_id]
        if len(remaining) == len(tasks):
            raise TaskNotFoundError(task_id)
        self._save(remaining)

    def quadrants(self) -> dict[str, list[Task]]:
        """Group tasks by quadrant, keeping board order within each."""
        grouped: dict[str, list[Task]] = {key: [] for key in QUADRANTS}
        for task in self.list():
            grouped[task.quadrant].append(task)
        return grouped
