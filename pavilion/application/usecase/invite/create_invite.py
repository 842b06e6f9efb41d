"""Create invite use case."""

from datetime import datetime, timezone
from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from pavilion.application.usecase.base import BaseUseCase
from pavilion.application.usecase.invite.common import InviteInfo
from pavilion.domain.model import CredentialPayload
from pavilion.domain.service import InviteService
from pavilion.domain.value import CapabilityBundle, GalleryId, InviteKind


class CreateInviteRequest(BaseModel):
    """Request to invite a guest to a gallery."""

    caller: CredentialPayload
    gallery_id: UUID
    recipient_email: str | None = None
    kind: InviteKind = InviteKind.SINGLE_USE
    capabilities: CapabilityBundle = Field(default_factory=CapabilityBundle)
    max_usage: int | None = Field(default=None, ge=1)
    expires_at: datetime | None = None


class CreateInviteResponse(BaseModel):
    """Created invite with the link to share."""

    code: str
    access_url: str
    invite: InviteInfo
    email_sent: bool


class CreateInviteUseCase(BaseUseCase):
    """Use case for creating an invite."""

    def __init__(self, invite_service: InviteService) -> None:
        """Initialize use case.

        Args:
            invite_service: Invite domain service
        """
        self.invite_service = invite_service

    async def execute(self, request: CreateInviteRequest) -> CreateInviteResponse:
        """Create the invite and send it to the recipient, if there is one.

        Args:
            request: Invite parameters and the caller's credential

        Returns:
            The invite, its access URL and whether the email went out

        Raises:
            NotFoundError: If the gallery does not exist
            UnauthorizedError: If the caller does not own the gallery
            ValidationError: If the limits or expiry are inconsistent
        """
        now = datetime.now(timezone.utc)
        with logfire.span(
            "create_invite.execute",
            gallery_id=str(request.gallery_id),
            subject_id=request.caller.subject_id,
        ):
            invite, delivered = await self.invite_service.create(
                caller=request.caller,
                gallery_id=GalleryId(request.gallery_id),
                capabilities=request.capabilities,
                kind=request.kind,
                recipient_email=request.recipient_email,
                max_usage=request.max_usage,
                expires_at=request.expires_at,
                now=now,
            )
            return CreateInviteResponse(
                code=invite.code.root,
                access_url=self.invite_service.access_url(invite),
                invite=InviteInfo.from_invite(invite, now),
                email_sent=delivered,
            )
