# src/taskvista/tasks/persistence.py

from __future__ import annotations

"""
Persistence bridge between the task store and the durable key-value store.

- load(): read the collection once at startup, fall back to the seed collection
  when the key is absent or holds anything that is not a valid task list.
- save(): overwrite the key with the full collection after every mutation.
  Failures are logged and reported through the return value, never raised.
"""

import json
import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from ..core.ports import KeyValueStore
from .seed import default_seed_tasks
from .task_models import Task, task_from_dict, task_to_dict

logger = logging.getLogger(__name__)

DEFAULT_TASKS_KEY = "tasks"

SeedFactory = Callable[[datetime | None], list[Task]]


def dumps(tasks: Iterable[Task]) -> str:
    return json.dumps([task_to_dict(t) for t in tasks], ensure_ascii=False)


def loads(raw: str) -> list[Task]:
    """
    Decode a stored collection.

    Raises ValueError if the payload is not a JSON array of valid task records
    or if two records share an id.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"stored tasks are not valid JSON: {e}") from e
    except RecursionError as e:
        raise ValueError("stored tasks are nested too deeply to decode") from e

    if not isinstance(data, list):
        raise ValueError(f"stored tasks must be a list, got {type(data).__name__}")

    tasks = [task_from_dict(item) for item in data]

    seen: set[str] = set()
    for t in tasks:
        if t.id in seen:
            raise ValueError(f"duplicate task id in stored collection: {t.id}")
        seen.add(t.id)
    return tasks


class TaskPersistence:
    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = DEFAULT_TASKS_KEY,
        seed_factory: SeedFactory = default_seed_tasks,
    ) -> None:
        self._kv = kv
        self._key = key
        self._seed_factory = seed_factory

    @property
    def key(self) -> str:
        return self._key

    def _write_seed(self, now: datetime | None) -> list[Task]:
        # Store the seed right away so its ids stay valid across restarts and a
        # corrupt value does not linger. A failed write is already logged by save().
        tasks = self._seed_factory(now)
        self.save(tasks)
        return tasks

    def load(self, now: datetime | None = None) -> list[Task]:
        """
        Read the stored collection, falling back to the seed.

        A missing or unreadable value is replaced by the seed in storage. When the
        store itself cannot be read, the seed is returned without writing so that
        data we failed to read is never overwritten.
        """
        try:
            raw = self._kv.get(self._key)
        except Exception:
            logger.exception("Failed to read stored tasks key=%s; using seed tasks.", self._key)
            return self._seed_factory(now)

        if raw is None:
            logger.info("No stored tasks under key=%s; using seed tasks.", self._key)
            return self._write_seed(now)

        try:
            tasks = loads(raw)
        except (ValueError, TypeError) as e:
            logger.warning("Failed to parse stored tasks key=%s (%s); using seed tasks.", self._key, e)
            return self._write_seed(now)

        logger.info("Loaded %d tasks from key=%s", len(tasks), self._key)
        return tasks

    def save(self, tasks: Iterable[Task]) -> bool:
        try:
            payload = dumps(tasks)
            self._kv.set(self._key, payload)
        except Exception:
            logger.warning("Failed to save tasks key=%s", self._key, exc_info=True)
            return False
        logger.debug("Saved tasks key=%s bytes=%d", self._key, len(payload))
        return True
