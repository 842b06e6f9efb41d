"""Response models shared by the invite use cases."""

from datetime import datetime

from pydantic import BaseModel

from pavilion.domain.model import Gallery, Invite
from pavilion.domain.service.capability import (
    effective_status,
    is_effectively_accessible,
)
from pavilion.domain.value import CapabilityBundle, InviteKind, InviteStatus


class InviteInfo(BaseModel):
    """Invite as shown to the gallery's owner."""

    id: str
    code: str
    gallery_id: str
    recipient_email: str | None
    kind: InviteKind
    status: InviteStatus  # Observed status, EXPIRED once expires_at has passed
    redeemable: bool  # Active, unexpired and with uses left
    capabilities: CapabilityBundle
    usage_count: int
    max_usage: int | None
    expires_at: datetime | None
    created_at: datetime
    used_at: datetime | None
    revoked_at: datetime | None

    @classmethod
    def from_invite(cls, invite: Invite, now: datetime) -> "InviteInfo":
        """Build the view of an invite at ``now``."""
        return cls(
            id=str(invite.id),
            code=invite.code.root,
            gallery_id=str(invite.gallery_id),
            recipient_email=invite.recipient_email,
            kind=invite.kind,
            status=effective_status(invite, now),
            redeemable=is_effectively_accessible(invite, now),
            capabilities=invite.capabilities,
            usage_count=invite.usage_count,
            max_usage=invite.max_usage,
            expires_at=invite.expires_at,
            created_at=invite.created_at,
            used_at=invite.used_at,
            revoked_at=invite.revoked_at,
        )


class InviteMeta(BaseModel):
    """Invite details safe to show to the guest redeeming it."""

    kind: InviteKind
    expires_at: datetime | None
    remaining_uses: int | None  # None = unlimited

    @classmethod
    def from_invite(cls, invite: Invite) -> "InviteMeta":
        """Build the guest-facing view of an invite."""
        remaining = (
            None if invite.max_usage is None else invite.max_usage - invite.usage_count
        )
        return cls(
            kind=invite.kind,
            expires_at=invite.expires_at,
            remaining_uses=remaining,
        )


class GalleryInfo(BaseModel):
    """Gallery summary attached to a validated invite."""

    id: str
    title: str
    description: str | None

    @classmethod
    def from_gallery(cls, gallery: Gallery) -> "GalleryInfo":
        """Build the summary of a gallery."""
        return cls(
            id=str(gallery.id),
            title=gallery.title,
            description=gallery.description,
        )
