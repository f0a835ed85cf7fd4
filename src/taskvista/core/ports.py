# src/taskvista/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store and session depend on Protocols instead of concrete implementations.
This keeps storage and notification targets swappable and makes testing easier.
"""

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """
    Durable string key-value storage (the browser localStorage equivalent).

    get() returns None for a missing key. set() overwrites.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


class NotificationSink(Protocol):
    """
    Receives mutation outcomes for the user (toasts in a GUI, lines in a console).

    Rendering is entirely up to the implementation.
    """

    def notify(self, notification: Any) -> None: ...

