# tests/conftest.py

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskvista.core.session import AuthSession
from taskvista.core.state import AppState
from taskvista.storage.kv_store import SqliteKeyValueStore
from taskvista.tasks.persistence import TaskPersistence
from taskvista.tasks.task_store import TaskStore

from .fakes import FakeNotifier, MemoryKeyValueStore

# Friday noon UTC; far enough from midnight that "today" is unambiguous in UTC.
NOW = datetime(2025, 3, 14, 12, 0, tzinfo=UTC)


def _no_seed(now=None):
    return []


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def kv() -> MemoryKeyValueStore:
    # An empty stored list, so loading does not write the seed and `writes` starts empty.
    return MemoryKeyValueStore({"tasks": "[]"})


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def store(kv: MemoryKeyValueStore, notifier: FakeNotifier) -> TaskStore:
    """Empty TaskStore (no seed) on an in-memory key-value store with a pinned clock."""
    return TaskStore(
        TaskPersistence(kv, seed_factory=_no_seed),
        notifier=notifier,
        clock=lambda: NOW,
    )


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the command layer.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="TaskVista",
        data_dir=tmp_path,
        storage_db_path=tmp_path / "storage.sqlite3",
        tasks_key="tasks",
        require_login=True,
        display_tz=UTC,
        console_enabled=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, notifier: FakeNotifier) -> AppState:
    """
    AppState wired with a real SQLite key-value store, no seed tasks and a pinned clock.

    NOTE: We keep the real SQLite store here because its correctness is part of
    what we want to test.
    """
    kv = SqliteKeyValueStore(settings.storage_db_path)
    return AppState(
        settings=settings,
        kv=kv,
        task_store=TaskStore(
            TaskPersistence(kv, key=settings.tasks_key, seed_factory=_no_seed),
            notifier=notifier,
            clock=lambda: NOW,
        ),
        session=AuthSession(kv),
        clock=lambda: NOW,
    )


@pytest.fixture()
def logged_in(state: AppState) -> AppState:
    state.session.login("alice@example.com", "secret")
    return state
