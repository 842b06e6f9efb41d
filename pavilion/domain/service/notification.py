"""Invite notification port.

Delivery is best effort: a failed send is reported by the return value
and never rolls back the invite it announces.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from pavilion.domain.value import CapabilityBundle


class InviteNotification(BaseModel):
    """Everything needed to render an invite email."""

    recipient_email: str
    gallery_title: str
    granter_name: str
    access_url: str
    capabilities: CapabilityBundle
    expires_at: Optional[datetime] = None


class NotificationClient(ABC):
    """Abstract client for delivering invite notifications."""

    @abstractmethod
    async def send_invite(self, notification: InviteNotification) -> bool:
        """Deliver an invite notification.

        Args:
            notification: Rendered invite details

        Returns:
            True if the transport accepted the message, False otherwise
        """
        pass
