# src/taskvista/core/state.py

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ..tasks.task_store import TaskStore
from .ports import KeyValueStore
from .session import AuthSession


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    kv: KeyValueStore
    task_store: TaskStore
    session: AuthSession

    # "now" for derived views; tests pin it.
    clock: Callable[[], datetime] = _utcnow
    lock: threading.RLock = field(default_factory=threading.RLock)
