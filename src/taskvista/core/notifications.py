# src/taskvista/core/notifications.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class NotificationKind(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    kind: NotificationKind
    title: str
    message: str

    def render(self) -> str:
        marker = "!" if self.kind is NotificationKind.ERROR else "+"
        return f"[{marker}] {self.title}: {self.message}"


class LoggingNotificationSink:
    """Default sink when no UI is attached: success -> INFO, error -> WARNING."""

    def notify(self, notification: Notification) -> None:
        level = logging.WARNING if notification.kind is NotificationKind.ERROR else logging.INFO
        logger.log(level, "%s: %s", notification.title, notification.message)


class CallbackNotificationSink:
    """Forward rendered notifications to a text emitter (console print, etc.)."""

    def __init__(self, emit: Callable[[str], None]) -> None:
        self._emit = emit

    def notify(self, notification: Notification) -> None:
        self._emit(notification.render())
