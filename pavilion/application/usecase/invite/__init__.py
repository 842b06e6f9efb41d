"""Invite use cases."""

from pavilion.application.usecase.invite.create_invite import (
    CreateInviteRequest,
    CreateInviteResponse,
    CreateInviteUseCase,
)
from pavilion.application.usecase.invite.list_invites import (
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
)
from pavilion.application.usecase.invite.preview_invite import (
    PreviewInviteRequest,
    PreviewInviteResponse,
    PreviewInviteUseCase,
)
from pavilion.application.usecase.invite.redeem_invite import (
    RedeemInviteRequest,
    RedeemInviteResponse,
    RedeemInviteUseCase,
)
from pavilion.application.usecase.invite.resend_invite import (
    ResendInviteRequest,
    ResendInviteResponse,
    ResendInviteUseCase,
)
from pavilion.application.usecase.invite.revoke_invite import (
    RevokeInviteRequest,
    RevokeInviteResponse,
    RevokeInviteUseCase,
)

__all__ = [
    "CreateInviteRequest",
    "CreateInviteResponse",
    "CreateInviteUseCase",
    "ListInvitesRequest",
    "ListInvitesResponse",
    "ListInvitesUseCase",
    "PreviewInviteRequest",
    "PreviewInviteResponse",
    "PreviewInviteUseCase",
    "RedeemInviteRequest",
    "RedeemInviteResponse",
    "RedeemInviteUseCase",
    "ResendInviteRequest",
    "ResendInviteResponse",
    "ResendInviteUseCase",
    "RevokeInviteRequest",
    "RevokeInviteResponse",
    "RevokeInviteUseCase",
]
