"""Domain layer DI providers."""

from dishka import Scope, provide

from pavilion.config import AuthSettings, InvitationSettings, SessionSettings, Settings
from pavilion.domain.repository import (
    GalleryRepository,
    IdentityRepository,
    InviteRepository,
)
from pavilion.domain.service import (
    IdentityService,
    InviteService,
    JWTService,
    NotificationClient,
)
from pavilion.persistence.gateway import StoreGateway
from pavilion.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped; each one is cheap to build and holds
    no state of its own.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(
        self, auth_settings: AuthSettings, session_settings: SessionSettings
    ) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(
            auth_settings=auth_settings, session_settings=session_settings
        )

    @provide
    def get_identity_service(
        self, identity_repository: IdentityRepository, gateway: StoreGateway
    ) -> IdentityService:
        """Provide identity domain service."""
        return IdentityService(
            identity_repository=identity_repository, gateway=gateway
        )

    @provide
    def get_invite_service(
        self,
        invite_repository: InviteRepository,
        gallery_repository: GalleryRepository,
        identity_repository: IdentityRepository,
        notification_client: NotificationClient,
        gateway: StoreGateway,
        invitation_settings: InvitationSettings,
        settings: Settings,
    ) -> InviteService:
        """Provide invite domain service."""
        return InviteService(
            invite_repository=invite_repository,
            gallery_repository=gallery_repository,
            identity_repository=identity_repository,
            notification_client=notification_client,
            gateway=gateway,
            settings=invitation_settings,
            frontend_url=settings.api.frontend_url,
        )
