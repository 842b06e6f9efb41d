"""Invite email delivery.

Renders the invite email and hands it to a transactional-mail webhook.
Without a webhook configured, invites are only logged.
"""

import httpx
import logfire

from pavilion.adapter.error import NotificationDeliveryError
from pavilion.domain.service.notification import InviteNotification, NotificationClient
from pavilion.domain.value import Capability

_CAPABILITY_LABELS = {
    Capability.VIEW: "View photos",
    Capability.FAVORITE: "Mark favorites",
    Capability.COMMENT: "Leave comments",
    Capability.DOWNLOAD: "Download photos",
    Capability.REQUEST_PURCHASE: "Request prints",
}


def render_subject(notification: InviteNotification) -> str:
    """Subject line for an invite email."""
    return f"{notification.granter_name} invited you to view {notification.gallery_title}"


def render_text(notification: InviteNotification) -> str:
    """Plain-text body for an invite email."""
    granted = [
        label
        for capability, label in _CAPABILITY_LABELS.items()
        if notification.capabilities.allows(capability)
    ]
    lines = [
        f"{notification.granter_name} has shared the gallery "
        f'"{notification.gallery_title}" with you.',
        "",
        f"Open your gallery: {notification.access_url}",
        "",
        "With this invite you can:",
        *(f"  - {label}" for label in granted),
    ]
    if notification.expires_at is not None:
        lines += ["", f"This invite expires on {notification.expires_at:%B %d, %Y}."]
    return "\n".join(lines)


class HttpNotificationClient(NotificationClient):
    """Posts rendered invite emails to a transactional-mail webhook."""

    def __init__(
        self,
        webhook_url: str,
        sender: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            webhook_url: Endpoint accepting JSON email payloads
            sender: From address
            api_key: Bearer token for the webhook, if it requires one
            timeout: Request timeout in seconds
            transport: httpx transport override, used by tests
        """
        self.webhook_url = webhook_url
        self.sender = sender
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    async def _post(self, payload: dict) -> None:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers=headers,
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            raise NotificationDeliveryError(f"HTTP error sending invite: {e}") from e

        if response.status_code >= 400:
            logfire.error(
                "Invite email rejected by mail webhook",
                status_code=response.status_code,
                error=response.text,
            )
            raise NotificationDeliveryError(
                f"Mail webhook returned {response.status_code}"
            )

    async def send_invite(self, notification: InviteNotification) -> bool:
        """Send an invite email, reporting failure instead of raising."""
        payload = {
            "from": self.sender,
            "to": [notification.recipient_email],
            "subject": render_subject(notification),
            "text": render_text(notification),
        }
        try:
            await self._post(payload)
        except NotificationDeliveryError as e:
            logfire.warn(
                "Invite email not delivered",
                recipient=notification.recipient_email,
                error=str(e),
            )
            return False

        logfire.info(
            "Invite email sent",
            recipient=notification.recipient_email,
            gallery_title=notification.gallery_title,
        )
        return True


class LoggingNotificationClient(NotificationClient):
    """Logs invite emails instead of sending them.

    Used when no mail webhook is configured (local development).
    """

    async def send_invite(self, notification: InviteNotification) -> bool:
        """Log the rendered email."""
        logfire.info(
            "Invite email (not sent, no mail webhook configured)",
            recipient=notification.recipient_email,
            subject=render_subject(notification),
            access_url=notification.access_url,
        )
        return True


class MockNotificationClient(NotificationClient):
    """Mock notification client for testing.

    Records every notification instead of sending it. Set ``succeed`` to
    False to simulate a transport failure.
    """

    def __init__(self, succeed: bool = True) -> None:
        self.sent: list[InviteNotification] = []
        self.succeed = succeed

    async def send_invite(self, notification: InviteNotification) -> bool:
        """Record the notification."""
        self.sent.append(notification)
        return self.succeed
