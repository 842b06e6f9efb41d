"""Invite routes."""

from datetime import datetime
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, Request, Response, status
from pydantic import BaseModel, Field

from pavilion.application.usecase.invite import (
    CreateInviteRequest,
    CreateInviteResponse,
    CreateInviteUseCase,
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
    PreviewInviteRequest,
    PreviewInviteResponse,
    PreviewInviteUseCase,
    RedeemInviteRequest,
    RedeemInviteUseCase,
    ResendInviteRequest,
    ResendInviteResponse,
    ResendInviteUseCase,
    RevokeInviteRequest,
    RevokeInviteResponse,
    RevokeInviteUseCase,
)
from pavilion.application.usecase.invite.common import GalleryInfo, InviteMeta
from pavilion.config import Settings
from pavilion.domain.service import JWTService
from pavilion.domain.value import CapabilityBundle, InviteKind
from pavilion.interface.api.dependencies import require_credential
from pavilion.interface.api.session import SessionCookie

router = APIRouter(prefix="/invites", tags=["invites"], route_class=DishkaRoute)


class CreateInviteAPIRequest(BaseModel):
    """API request for creating an invite."""

    gallery_id: UUID
    recipient_email: str | None = None
    kind: InviteKind = InviteKind.SINGLE_USE
    capabilities: CapabilityBundle = Field(default_factory=CapabilityBundle)
    max_usage: int | None = Field(default=None, ge=1)
    expires_at: datetime | None = None


class RedeemInviteAPIResponse(BaseModel):
    """Redemption result; the credential itself travels in the cookie."""

    user_id: str
    gallery: GalleryInfo
    capabilities: CapabilityBundle
    invite: InviteMeta


@router.post(
    "", response_model=CreateInviteResponse, status_code=status.HTTP_201_CREATED
)
async def create_invite(
    request: CreateInviteAPIRequest,
    http_request: Request,
    create_invite_use_case: FromDishka[CreateInviteUseCase],
    jwt_service: FromDishka[JWTService],
) -> CreateInviteResponse:
    """Invite a guest to a gallery.

    Only the gallery's owner or an administrator may create invites.
    """
    caller = require_credential(http_request, jwt_service)
    return await create_invite_use_case.execute(
        CreateInviteRequest(caller=caller, **request.model_dump())
    )


@router.get("", response_model=ListInvitesResponse)
async def list_invites(
    http_request: Request,
    list_invites_use_case: FromDishka[ListInvitesUseCase],
    jwt_service: FromDishka[JWTService],
    gallery_id: UUID = Query(...),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> ListInvitesResponse:
    """List a gallery's invites, newest first."""
    caller = require_credential(http_request, jwt_service)
    return await list_invites_use_case.execute(
        ListInvitesRequest(
            caller=caller, gallery_id=gallery_id, limit=limit, offset=offset
        )
    )


@router.post("/preview", response_model=PreviewInviteResponse)
async def preview_invite(
    request: PreviewInviteRequest,
    preview_invite_use_case: FromDishka[PreviewInviteUseCase],
) -> PreviewInviteResponse:
    """Check an invite before redeeming it. Nothing is consumed."""
    return await preview_invite_use_case.execute(request)


@router.post("/redeem", response_model=RedeemInviteAPIResponse)
async def redeem_invite(
    request: RedeemInviteRequest,
    response: Response,
    redeem_invite_use_case: FromDishka[RedeemInviteUseCase],
    settings: FromDishka[Settings],
) -> RedeemInviteAPIResponse:
    """Redeem an invite by code or email and start a guest session."""
    result = await redeem_invite_use_case.execute(request)
    SessionCookie.from_settings(settings).attach(response, result.token)
    return RedeemInviteAPIResponse(
        user_id=result.user_id,
        gallery=result.gallery,
        capabilities=result.capabilities,
        invite=result.invite,
    )


@router.post("/{invite_id}/revoke", response_model=RevokeInviteResponse)
async def revoke_invite(
    invite_id: UUID,
    http_request: Request,
    revoke_invite_use_case: FromDishka[RevokeInviteUseCase],
    jwt_service: FromDishka[JWTService],
) -> RevokeInviteResponse:
    """Revoke an invite. Revoking twice is reported as a conflict."""
    caller = require_credential(http_request, jwt_service)
    return await revoke_invite_use_case.execute(
        RevokeInviteRequest(caller=caller, invite_id=invite_id)
    )


@router.post("/{invite_id}/resend", response_model=ResendInviteResponse)
async def resend_invite(
    invite_id: UUID,
    http_request: Request,
    resend_invite_use_case: FromDishka[ResendInviteUseCase],
    jwt_service: FromDishka[JWTService],
) -> ResendInviteResponse:
    """Send the invite email again without changing the invite."""
    caller = require_credential(http_request, jwt_service)
    return await resend_invite_use_case.execute(
        ResendInviteRequest(caller=caller, invite_id=invite_id)
    )
