"""Preview invite use case."""

import logfire
from pydantic import BaseModel

from pavilion.application.usecase.base import BaseUseCase
from pavilion.application.usecase.invite.common import GalleryInfo, InviteMeta
from pavilion.domain.service import InviteService
from pavilion.domain.service.capability import derive_capabilities
from pavilion.domain.value import CapabilityBundle


class PreviewInviteRequest(BaseModel):
    """Invite lookup by code or by recipient email."""

    code: str | None = None
    email: str | None = None


class PreviewInviteResponse(BaseModel):
    """What redeeming the invite would grant."""

    gallery: GalleryInfo
    capabilities: CapabilityBundle
    invite: InviteMeta


class PreviewInviteUseCase(BaseUseCase):
    """Use case for checking an invite before redeeming it.

    Lets the landing page show the gallery title and expiry before the
    guest commits. Nothing is consumed.
    """

    def __init__(self, invite_service: InviteService) -> None:
        """Initialize use case.

        Args:
            invite_service: Invite domain service
        """
        self.invite_service = invite_service

    async def execute(self, request: PreviewInviteRequest) -> PreviewInviteResponse:
        """Validate an invite without redeeming it.

        Raises:
            ValidationError: If not exactly one of code or email was given
            InviteValidationError: If the invite cannot be redeemed
        """
        with logfire.span("preview_invite.execute"):
            invite, gallery = await self.invite_service.validate(
                code=request.code, email=request.email
            )
            return PreviewInviteResponse(
                gallery=GalleryInfo.from_gallery(gallery),
                capabilities=derive_capabilities(invite),
                invite=InviteMeta.from_invite(invite),
            )
