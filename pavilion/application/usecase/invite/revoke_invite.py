"""Revoke invite use case."""

from datetime import datetime, timezone
from uuid import UUID

import logfire
from pydantic import BaseModel

from pavilion.application.usecase.base import BaseUseCase
from pavilion.application.usecase.invite.common import InviteInfo
from pavilion.domain.model import CredentialPayload
from pavilion.domain.service import InviteService
from pavilion.domain.value import InviteId, InviteStatus


class RevokeInviteRequest(BaseModel):
    """Request to revoke an invite."""

    caller: CredentialPayload
    invite_id: UUID


class RevokeInviteResponse(BaseModel):
    """Revoked invite."""

    status: InviteStatus
    invite: InviteInfo


class RevokeInviteUseCase(BaseUseCase):
    """Use case for revoking an invite."""

    def __init__(self, invite_service: InviteService) -> None:
        self.invite_service = invite_service

    async def execute(self, request: RevokeInviteRequest) -> RevokeInviteResponse:
        """Revoke the invite.

        Raises:
            InviteNotFoundError: If the invite does not exist
            UnauthorizedError: If the caller does not own the gallery
            InviteAlreadyRevokedError: If the invite was already revoked
        """
        now = datetime.now(timezone.utc)
        with logfire.span("revoke_invite.execute", invite_id=str(request.invite_id)):
            invite = await self.invite_service.revoke(
                request.caller, InviteId(request.invite_id), now=now
            )
            return RevokeInviteResponse(
                status=invite.status, invite=InviteInfo.from_invite(invite, now)
            )
