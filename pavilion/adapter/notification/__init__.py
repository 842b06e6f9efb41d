"""Invite notification adapter."""

from .client import (
    HttpNotificationClient,
    LoggingNotificationClient,
    MockNotificationClient,
)

__all__ = [
    "HttpNotificationClient",
    "LoggingNotificationClient",
    "MockNotificationClient",
]
