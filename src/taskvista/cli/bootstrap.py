# src/taskvista/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/persistence/store/session).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.notifications import LoggingNotificationSink
from ..core.ports import KeyValueStore, NotificationSink
from ..core.session import AuthSession
from ..core.state import AppState
from ..storage.kv_store import SqliteKeyValueStore
from ..tasks.persistence import TaskPersistence
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    kv: KeyValueStore | None = None,
    notifier: NotificationSink | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings(). If kv is None, the SQLite store at
    settings.storage_db_path is used.
    """
    if settings is None:
        settings = get_settings()

    if kv is None:
        _ensure_local_dirs(settings)
        kv = SqliteKeyValueStore(settings.storage_db_path)

    persistence = TaskPersistence(kv, key=getattr(settings, "tasks_key", "tasks"))
    task_store = TaskStore(persistence, notifier=notifier or LoggingNotificationSink())

    return AppState(
        settings=settings,
        kv=kv,
        task_store=task_store,
        session=AuthSession(kv),
    )
