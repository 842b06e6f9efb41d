"""Resend invite use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from pavilion.application.usecase.base import BaseUseCase
from pavilion.domain.model import CredentialPayload
from pavilion.domain.service import InviteService
from pavilion.domain.value import InviteId


class ResendInviteRequest(BaseModel):
    """Request to re-deliver an invite email."""

    caller: CredentialPayload
    invite_id: UUID


class ResendInviteResponse(BaseModel):
    """Delivery outcome."""

    status: str  # "sent" or "failed"
    email_sent: bool


class ResendInviteUseCase(BaseUseCase):
    """Use case for resending an invite email.

    The invite itself is not modified.
    """

    def __init__(self, invite_service: InviteService) -> None:
        self.invite_service = invite_service

    async def execute(self, request: ResendInviteRequest) -> ResendInviteResponse:
        """Resend the invite.

        Raises:
            InviteNotFoundError: If the invite does not exist
            UnauthorizedError: If the caller does not own the gallery
            InviteAlreadyRevokedError: If the invite was revoked
            InviteExpiredError: If the invite has expired
            ValidationError: If the invite has no recipient email
        """
        with logfire.span("resend_invite.execute", invite_id=str(request.invite_id)):
            delivered = await self.invite_service.resend(
                request.caller, InviteId(request.invite_id)
            )
            return ResendInviteResponse(
                status="sent" if delivered else "failed", email_sent=delivered
            )
