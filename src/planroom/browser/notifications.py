"""Transient user notifications raised by browser actions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional

LOGGER = logging.getLogger(__name__)

NotificationLevel = Literal["success", "error", "info"]


@dataclass(frozen=True, slots=True)
class Notification:
    """A message shown to the user once.

    Attributes:
        level: Severity of the message.
        message: Human-readable text.
    """

    level: NotificationLevel
    message: str


NotificationSink = Callable[[Notification], object]


class Notifier:
    """Record notifications and forward them to an optional sink."""

    def __init__(self, sink: Optional[NotificationSink] = None) -> None:
        self._sink = sink
        self._history: list[Notification] = []

    @property
    def history(self) -> list[Notification]:
        return list(self._history)

    @property
    def last(self) -> Optional[Notification]:
        return self._history[-1] if self._history else None

    def success(self, message: str) -> None:
        self._emit(Notification(level="success", message=message))

    def error(self, message: str) -> None:
        self._emit(Notification(level="error", message=message))

    def info(self, message: str) -> None:
        self._emit(Notification(level="info", message=message))

    def clear(self) -> None:
        self._history.clear()

    def _emit(self, notification: Notification) -> None:
        self._history.append(notification)
        if notification.level == "error":
            LOGGER.warning(notification.message)
        else:
            LOGGER.info(notification.message)
        if self._sink is not None:
            self._sink(notification)


def pluralize(count: int, noun: str) -> str:
    """Return ``"1 file"`` / ``"3 files"`` style phrases."""

    return f"{count} {noun}{'' if count == 1 else 's'}"


__all__ = ["Notification", "NotificationLevel", "Notifier", "pluralize"]
