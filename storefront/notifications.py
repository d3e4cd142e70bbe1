"""Single-slot, self-expiring user notifications."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from itertools import count
from typing import Callable

from storefront.config import NOTIFICATION_TIMEOUT_SECONDS


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A message shown to the user until it expires or is dismissed."""

    id: int
    message: str
    kind: NotificationKind
    expires_at: float


Listener = Callable[["Notification | None"], None]


class NotificationChannel:
    """
    Holds at most one active notification.

    Showing a new notification replaces the current one. Expiry is evaluated
    lazily against ``clock`` so callers that never poll still see a cleared
    slot once the timeout has passed.
    """

    def __init__(
        self,
        timeout: float = NOTIFICATION_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout = timeout
        self._clock = clock
        self._ids = count(1)
        self._active: Notification | None = None
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    @property
    def active(self) -> Notification | None:
        if self._active is not None and self._clock() >= self._active.expires_at:
            self._active = None
        return self._active

    def success(self, message: str) -> Notification:
        return self.show(message, NotificationKind.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.show(message, NotificationKind.ERROR)

    def show(self, message: str, kind: NotificationKind) -> Notification:
        notification = Notification(
            id=next(self._ids),
            message=message,
            kind=kind,
            expires_at=self._clock() + self.timeout,
        )
        self._active = notification
        self._emit()
        return notification

    def dismiss(self, notification_id: int | None = None) -> bool:
        """
        Clear the active notification.

        With ``notification_id`` only that notification is cleared, so a timer
        belonging to a replaced notification cannot remove its successor.
        Returns True only when something was actually cleared.
        """
        current = self.active
        if current is None:
            return False
        if notification_id is not None and current.id != notification_id:
            return False
        self._active = None
        self._emit()
        return True

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self._active)
