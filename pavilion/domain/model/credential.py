"""Credential claims carried by a signed token.

Claims are immutable once signed; changing any of them requires issuing a
new token.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from pavilion.domain.model.common import DomainModel
from pavilion.domain.value import CapabilityBundle, GalleryId, Role, UserId


class CredentialClaims(DomainModel):
    """Identity and capability claims, before signing."""

    subject_id: str
    email: str
    role: Role
    owner_profile_id: Optional[UserId] = None
    guest_profile_id: Optional[UserId] = None
    resource_id: Optional[GalleryId] = None  # Gallery a guest credential is scoped to
    invite_code: Optional[str] = None
    permissions: CapabilityBundle = Field(default_factory=CapabilityBundle)


class CredentialPayload(CredentialClaims):
    """Claims as returned by verification, with the timestamps set at issue."""

    issued_at: datetime
    expires_at: datetime

    def claims(self) -> CredentialClaims:
        """Strip the issue timestamps."""
        return CredentialClaims(
            **self.model_dump(exclude={"issued_at", "expires_at"})
        )
