"""User-facing notifications (toasts)."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import List

import logfire
from pydantic import BaseModel


class NotificationLevel(str, Enum):
    """Severity of a notification."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    """A short message shown to the user."""

    level: NotificationLevel
    title: str
    message: str = ""


class Notifier(ABC):
    """Delivers notifications to the current user."""

    @abstractmethod
    async def notify(self, notification: Notification) -> None:
        pass

    async def error(self, title: str, message: str = "") -> None:
        await self.notify(
            Notification(level=NotificationLevel.ERROR, title=title, message=message)
        )

    async def success(self, title: str, message: str = "") -> None:
        await self.notify(
            Notification(level=NotificationLevel.SUCCESS, title=title, message=message)
        )

    async def info(self, title: str, message: str = "") -> None:
        await self.notify(
            Notification(level=NotificationLevel.INFO, title=title, message=message)
        )


class LoggingNotifier(Notifier):
    """Notifier for contexts without a live user channel."""

    async def notify(self, notification: Notification) -> None:
        logfire.info(
            "Notification",
            level=notification.level.value,
            title=notification.title,
            message=notification.message,
        )


class CollectingNotifier(Notifier):
    """Keeps notifications so a request can return them with its response."""

    def __init__(self) -> None:
        self.notifications: List[Notification] = []

    async def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)


class CallbackNotifier(Notifier):
    """Forwards notifications to an async callback (e.g. a websocket)."""

    def __init__(self, send: Callable[[Notification], Awaitable[None]]) -> None:
        self._send = send

    async def notify(self, notification: Notification) -> None:
        await self._send(notification)
