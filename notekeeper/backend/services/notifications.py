"""
User Notifications.

The notes store reports the outcome of every user action here instead
of raising. Consumers (the CLI, a UI) drain and render the queue.

Usage:
    notifier = Notifier()
    store = NotesStore(service, notifier)
    await store.create(NoteCreate(title="Groceries"))
    for notification in notifier.drain():
        print(notification.title, notification.description)
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from notekeeper.backend.core.exceptions import ApplicationError
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.core.utils import utc_now

logger = get_logger(__name__)


class NotificationLevel(str, Enum):
    """Severity of a notification."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A single message for the user."""

    title: str
    description: str
    level: NotificationLevel = NotificationLevel.SUCCESS
    code: str | None = None
    created_at: datetime = field(default_factory=utc_now)

    @property
    def is_error(self) -> bool:
        return self.level is NotificationLevel.ERROR


class Notifier:
    """
    Ordered queue of notifications, logged as they are raised.

    ``failures`` counts error notifications and is not reset by ``drain``.
    """

    def __init__(self) -> None:
        self._pending: list[Notification] = []
        self.failures = 0

    def success(self, title: str, description: str) -> Notification:
        notification = Notification(title=title, description=description)
        logger.info(title, description=description)
        self._pending.append(notification)
        return notification

    def error(self, title: str, error: ApplicationError) -> Notification:
        notification = Notification(
            title=title,
            description=error.message,
            level=NotificationLevel.ERROR,
            code=error.code,
        )
        logger.warning(title, code=error.code, description=error.message)
        self.failures += 1
        self._pending.append(notification)
        return notification

    @property
    def pending(self) -> tuple[Notification, ...]:
        return tuple(self._pending)

    def drain(self) -> list[Notification]:
        """Return and clear all pending notifications."""
        drained, self._pending = self._pending, []
        return drained
