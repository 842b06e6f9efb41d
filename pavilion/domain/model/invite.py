"""Invite entity.

An invite is a capability-scoped access grant to one gallery, addressed by
an opaque code and optionally bound to a recipient email.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, field_validator, model_validator

from pavilion.domain.model.common import DomainModel
from pavilion.domain.value import (
    CapabilityBundle,
    GalleryId,
    InviteCode,
    InviteId,
    InviteKind,
    InviteStatus,
    UserId,
    normalize_email,
)


class Invite(DomainModel):
    """Invite entity.

    Business rules:
    - Revoked is terminal: no redemption, resend or reactivation
    - usage_count never exceeds max_usage when max_usage is set
    - Single-use invites always carry max_usage == 1
    - Expiry is derived from expires_at at validation time, never stored
    - Invites are never deleted, only status-transitioned (audit trail)
    """

    id: InviteId
    code: InviteCode
    gallery_id: GalleryId
    created_by: UserId
    recipient_email: Optional[str] = None
    kind: InviteKind = InviteKind.SINGLE_USE
    status: InviteStatus = InviteStatus.ACTIVE
    capabilities: CapabilityBundle = Field(default_factory=CapabilityBundle)
    usage_count: int = Field(default=0, ge=0)
    max_usage: Optional[int] = Field(default=None, ge=1)  # None = unlimited
    expires_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    used_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None

    @field_validator("recipient_email")
    @classmethod
    def validate_recipient_email(cls, v: Optional[str]) -> Optional[str]:
        """Store recipient emails in canonical lowercase form."""
        return normalize_email(v) if v else None

    @field_validator("status")
    @classmethod
    def reject_derived_status(cls, v: InviteStatus) -> InviteStatus:
        """EXPIRED is observed, not stored."""
        if v == InviteStatus.EXPIRED:
            raise ValueError("Expired is derived from expires_at and cannot be stored")
        return v

    @model_validator(mode="after")
    def check_usage(self) -> "Invite":
        """Enforce the usage invariants."""
        if self.kind == InviteKind.SINGLE_USE and self.max_usage != 1:
            raise ValueError("Single-use invites must have max_usage of 1")
        if self.max_usage is not None and self.usage_count > self.max_usage:
            raise ValueError("usage_count cannot exceed max_usage")
        return self
