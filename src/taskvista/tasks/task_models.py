# src/taskvista/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """Kanban column a task lives in."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str
    due_date: datetime
    priority: TaskPriority
    status: TaskStatus
    created_at: datetime

    start_date: datetime | None = None
    assigned_to: str | None = None  # user id, not checked against any user list


# Stored objects use the browser-era camelCase keys.
_REQUIRED_WIRE_FIELDS = ("id", "title", "dueDate", "priority", "status", "createdAt")


def format_ts(dt: datetime) -> str:
    return dt.astimezone(UTC).isoformat()


def parse_ts(raw: Any) -> datetime:
    """
    Parse an ISO 8601 timestamp into an aware datetime.

    Accepts a trailing "Z" (as written by browsers). Naive values are read as UTC.
    """
    if isinstance(raw, datetime):
        dt = raw
    elif isinstance(raw, str) and raw.strip():
        dt = datetime.fromisoformat(raw.strip())
    else:
        raise ValueError(f"invalid timestamp: {raw!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "dueDate": format_ts(task.due_date),
        "startDate": format_ts(task.start_date) if task.start_date is not None else None,
        "priority": task.priority.value,
        "status": task.status.value,
        "createdAt": format_ts(task.created_at),
        "assignedTo": task.assigned_to,
    }


def task_from_dict(data: Any) -> Task:
    """
    Build a Task from its stored representation.

    Raises ValueError when a required field is missing or any value is out of range
    (unknown status/priority, empty title, unparsable date).
    """
    if not isinstance(data, dict):
        raise ValueError(f"task record must be an object, got {type(data).__name__}")

    missing = [wire for wire in _REQUIRED_WIRE_FIELDS if wire not in data]
    if missing:
        raise ValueError(f"task record is missing fields: {', '.join(missing)}")

    task_id = data["id"]
    if not isinstance(task_id, str) or not task_id:
        raise ValueError(f"invalid task id: {task_id!r}")

    title = data["title"]
    if not isinstance(title, str) or not title.strip():
        raise ValueError(f"invalid title for task {task_id}")

    description = data.get("description") or ""
    if not isinstance(description, str):
        raise ValueError(f"invalid description for task {task_id}")

    start_raw = data.get("startDate")
    assigned_to = data.get("assignedTo")
    if assigned_to is not None and not isinstance(assigned_to, str):
        raise ValueError(f"invalid assignedTo for task {task_id}")

    return Task(
        id=task_id,
        title=title,
        description=description,
        due_date=parse_ts(data["dueDate"]),
        priority=TaskPriority(data["priority"]),
        status=TaskStatus(data["status"]),
        created_at=parse_ts(data["createdAt"]),
        start_date=parse_ts(start_raw) if start_raw is not None else None,
        assigned_to=assigned_to or None,
    )
