"""Notification infrastructure providers."""

from dishka import Scope, provide

from pavilion.adapter.notification.client import (
    HttpNotificationClient,
    LoggingNotificationClient,
)
from pavilion.config import NotificationSettings
from pavilion.domain.service.notification import NotificationClient
from pavilion.util.di.base import ProviderBase


class NotificationProvider(ProviderBase):
    """Notification component base."""

    __mock_component__ = "notification"


class ProdNotificationProvider(NotificationProvider):
    """Production notification provider.

    Sends through the mail webhook when one is configured, otherwise logs.
    """

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_notification_client(
        self, settings: NotificationSettings
    ) -> NotificationClient:
        """Provide invite notification client."""
        if settings.webhook_url:
            return HttpNotificationClient(
                webhook_url=settings.webhook_url,
                sender=settings.sender,
                api_key=settings.api_key,
                timeout=settings.timeout_seconds,
            )
        return LoggingNotificationClient()
