# src/taskvista/tasks/seed.py

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

from .task_models import Task, TaskPriority, TaskStatus

# (title, description, due offset in days, priority, status)
_SEED_ROWS = (
    (
        "Complete project proposal",
        "Write and submit the project proposal for client review.",
        2,
        TaskPriority.HIGH,
        TaskStatus.IN_PROGRESS,
    ),
    (
        "Weekly team meeting",
        "Discuss progress and upcoming tasks with the development team.",
        1,
        TaskPriority.MEDIUM,
        TaskStatus.TODO,
    ),
    (
        "Update documentation",
        "Update the user guide with new feature information.",
        5,
        TaskPriority.LOW,
        TaskStatus.TODO,
    ),
    (
        "Fix login page bug",
        "Address the authentication issue on the login page.",
        -1,
        TaskPriority.HIGH,
        TaskStatus.TODO,
    ),
    (
        "Client presentation",
        "Prepare slides and demo for the client presentation.",
        3,
        TaskPriority.HIGH,
        TaskStatus.TODO,
    ),
    (
        "Archive old tickets",
        "Close and archive tickets from the previous sprint.",
        -3,
        TaskPriority.LOW,
        TaskStatus.DONE,
    ),
    (
        "Review pull requests",
        "Go through the open pull requests before the release.",
        4,
        TaskPriority.MEDIUM,
        TaskStatus.DONE,
    ),
)


def default_seed_tasks(now: datetime | None = None) -> list[Task]:
    """
    Built-in example collection used on first run or when stored data is unreadable.

    Due dates are relative to `now`, so "Fix login page bug" is always overdue.
    """
    if now is None:
        now = datetime.now(UTC)

    return [
        Task(
            id=uuid.uuid4().hex[:12],
            title=title,
            description=description,
            due_date=now + timedelta(days=offset),
            priority=priority,
            status=status,
            created_at=now,
        )
        for title, description, offset, priority, status in _SEED_ROWS
    ]
