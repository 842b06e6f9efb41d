"""List invites use case."""

from datetime import datetime, timezone
from uuid import UUID

from pydantic import BaseModel, Field

from pavilion.application.usecase.base import BaseUseCase
from pavilion.application.usecase.invite.common import InviteInfo
from pavilion.domain.model import CredentialPayload
from pavilion.domain.service import InviteService
from pavilion.domain.value import GalleryId


class ListInvitesRequest(BaseModel):
    """Request for a gallery's invites."""

    caller: CredentialPayload
    gallery_id: UUID
    limit: int = Field(default=50, ge=1, le=200)
    offset: int = Field(default=0, ge=0)


class ListInvitesResponse(BaseModel):
    """A page of invites, newest first."""

    invites: list[InviteInfo]


class ListInvitesUseCase(BaseUseCase):
    """Use case for listing the invites of a gallery."""

    def __init__(self, invite_service: InviteService) -> None:
        self.invite_service = invite_service

    async def execute(self, request: ListInvitesRequest) -> ListInvitesResponse:
        """List invites.

        Raises:
            NotFoundError: If the gallery does not exist
            UnauthorizedError: If the caller does not own the gallery
        """
        now = datetime.now(timezone.utc)
        invites = await self.invite_service.list_for_gallery(
            request.caller,
            GalleryId(request.gallery_id),
            limit=request.limit,
            offset=request.offset,
        )
        return ListInvitesResponse(
            invites=[InviteInfo.from_invite(invite, now) for invite in invites]
        )
