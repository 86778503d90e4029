"""
iReporter - Notifications
One-way channel for user-visible messages.
"""

from ireporter.notifications.channel import (
    Notification,
    NotificationVariant,
    NotificationChannel,
    LoggingNotificationChannel,
    MemoryNotificationChannel,
)

__all__ = [
    "Notification",
    "NotificationVariant",
    "NotificationChannel",
    "LoggingNotificationChannel",
    "MemoryNotificationChannel",
]
