"""Application layer DI providers."""

from dishka import Scope, provide

from pavilion.application.usecase.auth import GetCurrentIdentityUseCase, LoginUseCase
from pavilion.application.usecase.invite import (
    CreateInviteUseCase,
    ListInvitesUseCase,
    PreviewInviteUseCase,
    RedeemInviteUseCase,
    ResendInviteUseCase,
    RevokeInviteUseCase,
)
from pavilion.domain.service import IdentityService, InviteService, JWTService
from pavilion.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    scope = Scope.REQUEST

    # Auth use cases
    @provide
    def get_login_use_case(
        self, identity_service: IdentityService, jwt_service: JWTService
    ) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(identity_service=identity_service, jwt_service=jwt_service)

    @provide
    def get_current_identity_use_case(
        self, jwt_service: JWTService, identity_service: IdentityService
    ) -> GetCurrentIdentityUseCase:
        """Provide get current identity use case."""
        return GetCurrentIdentityUseCase(
            jwt_service=jwt_service, identity_service=identity_service
        )

    # Invite use cases
    @provide
    def get_create_invite_use_case(
        self, invite_service: InviteService
    ) -> CreateInviteUseCase:
        """Provide create invite use case."""
        return CreateInviteUseCase(invite_service=invite_service)

    @provide
    def get_list_invites_use_case(
        self, invite_service: InviteService
    ) -> ListInvitesUseCase:
        """Provide list invites use case."""
        return ListInvitesUseCase(invite_service=invite_service)

    @provide
    def get_preview_invite_use_case(
        self, invite_service: InviteService
    ) -> PreviewInviteUseCase:
        """Provide preview invite use case."""
        return PreviewInviteUseCase(invite_service=invite_service)

    @provide
    def get_redeem_invite_use_case(
        self,
        invite_service: InviteService,
        identity_service: IdentityService,
        jwt_service: JWTService,
    ) -> RedeemInviteUseCase:
        """Provide redeem invite use case."""
        return RedeemInviteUseCase(
            invite_service=invite_service,
            identity_service=identity_service,
            jwt_service=jwt_service,
        )

    @provide
    def get_revoke_invite_use_case(
        self, invite_service: InviteService
    ) -> RevokeInviteUseCase:
        """Provide revoke invite use case."""
        return RevokeInviteUseCase(invite_service=invite_service)

    @provide
    def get_resend_invite_use_case(
        self, invite_service: InviteService
    ) -> ResendInviteUseCase:
        """Provide resend invite use case."""
        return ResendInviteUseCase(invite_service=invite_service)
