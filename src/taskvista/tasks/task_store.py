# src/taskvista/tasks/task_store.py

from __future__ import annotations

import dataclasses
import logging
import threading
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from ..core.notifications import Notification, NotificationKind
from ..core.ports import NotificationSink
from .persistence import TaskPersistence
from .task_models import Task, TaskPriority, TaskStatus, parse_ts

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = frozenset({"id", "created_at", "createdAt"})
_UPDATABLE_FIELDS = frozenset(
    {"title", "description", "due_date", "start_date", "priority", "status", "assigned_to"}
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True, slots=True)
class MutationResult:
    """
    Outcome of a store mutation.

    task:      created / updated / removed task, None when the id was not found
    changed:   the in-memory collection was modified
    persisted: the durable copy was written successfully
    """

    task: Task | None
    changed: bool
    persisted: bool

    @property
    def found(self) -> bool:
        return self.task is not None


class TaskStore:
    """
    In-memory task collection, the only mutation surface for tasks.

    Every mutation follows the same order under one lock:
    commit in memory -> persist the full collection -> notify.
    A failed save is reported but never rolls back the in-memory change.
    """

    def __init__(
        self,
        persistence: TaskPersistence,
        *,
        notifier: NotificationSink | None = None,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._persistence = persistence
        self._notifier = notifier
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.RLock()
        self._tasks: list[Task] = list(persistence.load(clock()))
        logger.info("TaskStore ready key=%s total=%s", persistence.key, len(self._tasks))

    def close(self) -> None:
        """Compatibility hook for shutdown (every mutation is already persisted)."""
        return

    # ---- low-level helpers ----

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _generate_id(self) -> str:
        existing = {t.id for t in self._tasks}
        for _ in range(100):
            candidate = self._id_factory()
            if candidate and candidate not in existing:
                return candidate
        raise RuntimeError("could not generate a unique task id")

    def _persist(self) -> bool:
        ok = self._persistence.save(self._tasks)
        if not ok:
            self._notify(
                NotificationKind.ERROR,
                "Tasks not saved",
                "Your changes are kept for this session but could not be written to storage.",
            )
        return ok

    def _notify(self, kind: NotificationKind, title: str, message: str) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.notify(Notification(kind=kind, title=title, message=message))
        except Exception:
            logger.debug("Notification sink failed.", exc_info=True)

    @staticmethod
    def _coerce_field(name: str, value: Any) -> Any:
        if name == "title":
            if not isinstance(value, str) or not value.strip():
                raise ValueError("title is required")
            return value
        if name == "description":
            return "" if value is None else str(value)
        if name == "due_date":
            if value is None:
                raise ValueError("due_date is required")
            return parse_ts(value)
        if name == "start_date":
            return parse_ts(value) if value is not None else None
        if name == "priority":
            return TaskPriority(value)
        if name == "status":
            return TaskStatus(value)
        if name == "assigned_to":
            return str(value) if value else None
        raise ValueError(f"unknown task field: {name}")

    # ---- public API ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Snapshot of the collection in insertion order."""
        with self._lock:
            return tuple(self._tasks)

    def count(self) -> int:
        with self._lock:
            return len(self._tasks)

    def get_by_id(self, task_id: str) -> Task | None:
        with self._lock:
            idx = self._index_of(task_id)
            return self._tasks[idx] if idx is not None else None

    def create(
        self,
        *,
        title: str,
        description: str,
        due_date: datetime | str,
        priority: TaskPriority | str,
        status: TaskStatus | str | None = None,
        start_date: datetime | str | None = None,
        assigned_to: str | None = None,
    ) -> MutationResult:
        fields = {
            "title": self._coerce_field("title", title),
            "description": self._coerce_field("description", description),
            "due_date": self._coerce_field("due_date", due_date),
            "start_date": self._coerce_field("start_date", start_date),
            "priority": self._coerce_field("priority", priority),
            "status": self._coerce_field("status", status or TaskStatus.TODO),
            "assigned_to": self._coerce_field("assigned_to", assigned_to),
        }

        with self._lock:
            task = Task(id=self._generate_id(), created_at=self._clock(), **fields)
            self._tasks.append(task)
            logger.debug(
                "Task added id=%s priority=%s status=%s due=%s",
                task.id,
                task.priority.value,
                task.status.value,
                task.due_date.isoformat(),
            )

            persisted = self._persist()
            self._notify(
                NotificationKind.SUCCESS,
                "Task added",
                f'"{task.title}" has been added to your tasks.',
            )
            return MutationResult(task=task, changed=True, persisted=persisted)

    def update(
        self,
        task_id: str,
        changes: Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> MutationResult:
        """
        Merge partial fields over an existing task.

        Unknown id -> no-op (result.found is False, nothing persisted or notified),
        checked before the fields are looked at. id / created_at are ignored if
        supplied. Unknown field names and invalid values raise ValueError before
        anything changes.
        """
        merged: dict[str, Any] = {**(changes or {}), **fields}

        with self._lock:
            idx = self._index_of(task_id)
            if idx is None:
                logger.debug("Update skipped, task not found id=%s", task_id)
                return MutationResult(task=None, changed=False, persisted=False)

            ignored = sorted(k for k in merged if k in _IMMUTABLE_FIELDS)
            if ignored:
                logger.debug("Ignoring immutable fields on update id=%s: %s", task_id, ignored)
            coerced = {
                name: self._coerce_field(name, value)
                for name, value in merged.items()
                if name not in _IMMUTABLE_FIELDS
            }

            updated = dataclasses.replace(self._tasks[idx], **coerced)
            self._tasks[idx] = updated
            logger.debug("Task updated id=%s fields=%s", task_id, sorted(coerced))

            persisted = self._persist()
            self._notify(
                NotificationKind.SUCCESS,
                "Task updated",
                "Your task has been updated successfully.",
            )
            return MutationResult(task=updated, changed=True, persisted=persisted)

    def move(self, task_id: str, status: TaskStatus | str) -> MutationResult:
        """
        Move a task to another board column.

        Unknown id -> no-op, even when the status is not a valid column.
        Dropping a task back into its own column changes nothing.
        """
        with self._lock:
            current = self.get_by_id(task_id)
            if current is None:
                logger.debug("Move skipped, task not found id=%s", task_id)
                return MutationResult(task=None, changed=False, persisted=False)
            new_status = TaskStatus(status)
            if current.status is new_status:
                return MutationResult(task=current, changed=False, persisted=False)
            return self.update(task_id, status=new_status)

    def delete(self, task_id: str) -> MutationResult:
        with self._lock:
            idx = self._index_of(task_id)
            if idx is None:
                logger.debug("Delete skipped, task not found id=%s", task_id)
                return MutationResult(task=None, changed=False, persisted=False)

            removed = self._tasks.pop(idx)
            logger.debug("Task deleted id=%s", task_id)

            persisted = self._persist()
            self._notify(
                NotificationKind.SUCCESS,
                "Task deleted",
                f'"{removed.title}" has been removed.',
            )
            return MutationResult(task=removed, changed=True, persisted=persisted)
