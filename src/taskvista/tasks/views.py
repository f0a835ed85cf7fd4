# src/taskvista/tasks/views.py

from __future__ import annotations

"""
Derived views over a task collection.

Every function here is pure: it takes a snapshot (any iterable of tasks),
returns new containers, and never touches the store or storage. Views are
recomputed on every render; nothing is cached.

Calendar dates are taken in local time (dt.astimezone(tz), tz=None means the
system zone), matching what a user sees on the calendar.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from enum import StrEnum

from .task_models import Task, TaskPriority, TaskStatus

STATUS_ORDER = (TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.DONE)
PRIORITY_ORDER = (TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW)


class DueBucket(StrEnum):
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    UPCOMING = "upcoming"
    DONE = "done"


def local_date(dt: datetime, tz: tzinfo | None = None) -> date:
    return dt.astimezone(tz).date()


# ---- grouping ----


def group_by_status(tasks: Iterable[Task]) -> dict[TaskStatus, list[Task]]:
    groups: dict[TaskStatus, list[Task]] = {s: [] for s in STATUS_ORDER}
    for t in tasks:
        groups[t.status].append(t)
    return groups


def group_by_priority(tasks: Iterable[Task]) -> dict[TaskPriority, list[Task]]:
    groups: dict[TaskPriority, list[Task]] = {p: [] for p in PRIORITY_ORDER}
    for t in tasks:
        groups[t.priority].append(t)
    return groups


def group_by_due_date(tasks: Iterable[Task], tz: tzinfo | None = None) -> dict[date, list[Task]]:
    """Group by calendar day of due_date. Keys appear in order of first occurrence."""
    groups: dict[date, list[Task]] = {}
    for t in tasks:
        groups.setdefault(local_date(t.due_date, tz), []).append(t)
    return groups


# ---- ordering ----


def sort_by_due_date(tasks: Iterable[Task]) -> list[Task]:
    # sorted() is stable; the timeline alternates sides by index, so ties must keep source order.
    return sorted(tasks, key=lambda t: t.due_date)


def timeline(tasks: Iterable[Task], tz: tzinfo | None = None) -> dict[date, list[Task]]:
    """Days in chronological order, each with its tasks sorted by due time."""
    return group_by_due_date(sort_by_due_date(tasks), tz)


def tasks_on_date(tasks: Iterable[Task], day: date, tz: tzinfo | None = None) -> list[Task]:
    return [t for t in tasks if local_date(t.due_date, tz) == day]


# ---- due-date classification ----


def classify(task: Task, now: datetime, tz: tzinfo | None = None) -> DueBucket:
    """
    Put a task in exactly one bucket.

    done tasks are never overdue. A task due earlier today is OVERDUE, not DUE_TODAY.
    """
    if task.status is TaskStatus.DONE:
        return DueBucket.DONE
    if task.due_date < now:
        return DueBucket.OVERDUE
    if local_date(task.due_date, tz) == local_date(now, tz):
        return DueBucket.DUE_TODAY
    return DueBucket.UPCOMING


def _in_bucket(
    tasks: Iterable[Task], bucket: DueBucket, now: datetime, tz: tzinfo | None
) -> list[Task]:
    return [t for t in tasks if classify(t, now, tz) is bucket]


def overdue_tasks(tasks: Iterable[Task], now: datetime, tz: tzinfo | None = None) -> list[Task]:
    return _in_bucket(tasks, DueBucket.OVERDUE, now, tz)


def due_today_tasks(tasks: Iterable[Task], now: datetime, tz: tzinfo | None = None) -> list[Task]:
    return _in_bucket(tasks, DueBucket.DUE_TODAY, now, tz)


def upcoming_tasks(tasks: Iterable[Task], now: datetime, tz: tzinfo | None = None) -> list[Task]:
    return _in_bucket(tasks, DueBucket.UPCOMING, now, tz)


# ---- text search / filters ----


def _matches(task: Task, needle: str) -> bool:
    return needle in task.title.lower() or needle in task.description.lower()


def search(tasks: Iterable[Task], query: str) -> list[Task]:
    """
    Search page: case-insensitive substring match on title or description.

    An empty or whitespace-only query shows no results at all.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return []
    return [t for t in tasks if _matches(t, needle)]


def filter_board(
    tasks: Iterable[Task],
    query: str = "",
    priority: TaskPriority | str | None = None,
) -> list[Task]:
    """Board filter bar: an empty query keeps every task, priority narrows further."""
    needle = (query or "").strip().lower()
    wanted = TaskPriority(priority) if priority else None
    return [
        t
        for t in tasks
        if (not needle or _matches(t, needle)) and (wanted is None or t.priority is wanted)
    ]


# ---- dashboard ----


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    by_status: dict[TaskStatus, int]
    by_priority: dict[TaskPriority, int]
    by_bucket: dict[DueBucket, int]

    @property
    def completion_rate(self) -> float:
        if not self.total:
            return 0.0
        return self.by_status[TaskStatus.DONE] / self.total


def task_stats(tasks: Iterable[Task], now: datetime, tz: tzinfo | None = None) -> TaskStats:
    snapshot = list(tasks)
    by_bucket = {b: 0 for b in DueBucket}
    for t in snapshot:
        by_bucket[classify(t, now, tz)] += 1
    return TaskStats(
        total=len(snapshot),
        by_status={s: len(g) for s, g in group_by_status(snapshot).items()},
        by_priority={p: len(g) for p, g in group_by_priority(snapshot).items()},
        by_bucket=by_bucket,
    )
