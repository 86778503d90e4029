"""
User-visible notification sinks
The core only produces notifications; rendering belongs to the UI.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class NotificationVariant(str, Enum):
    """Presentation hint for the UI."""
    DEFAULT = "default"
    SUCCESS = "success"
    DESTRUCTIVE = "destructive"


@dataclass
class Notification:
    """A toast-style message for the user."""
    title: str
    description: str = ""
    variant: NotificationVariant = NotificationVariant.DEFAULT
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_error(self) -> bool:
        return self.variant == NotificationVariant.DESTRUCTIVE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "variant": self.variant.value,
        }


class NotificationChannel(ABC):
    """Write-only sink for notifications."""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        raise NotImplementedError

    def info(self, title: str, description: str = "") -> None:
        self.notify(Notification(title, description, NotificationVariant.DEFAULT))

    def error(self, title: str, description: str = "") -> None:
        self.notify(Notification(title, description, NotificationVariant.DESTRUCTIVE))


class LoggingNotificationChannel(NotificationChannel):
    """Writes notifications to the log. Used when no UI is attached."""

    def notify(self, notification: Notification) -> None:
        level = logging.WARNING if notification.is_error else logging.INFO
        logger.log(level, f"[NOTIFY] {notification.title}: {notification.description}")


class MemoryNotificationChannel(NotificationChannel):
    """Append-only in-memory channel, optionally forwarding to a UI callback."""

    def __init__(self, on_notify: Optional[Callable[[Notification], None]] = None):
        self.sent: List[Notification] = []
        self.on_notify = on_notify

    def notify(self, notification: Notification) -> None:
        self.sent.append(notification)
        if self.on_notify:
            self.on_notify(notification)

    @property
    def errors(self) -> List[Notification]:
        return [n for n in self.sent if n.is_error]
