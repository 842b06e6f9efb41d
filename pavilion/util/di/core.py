"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from pavilion.config import (
    AuthSettings,
    InvitationSettings,
    NotificationSettings,
    SessionSettings,
    Settings,
    StoreSettings,
)
from pavilion.persistence.gateway import StoreGateway
from pavilion.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    scope = Scope.APP

    @provide
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide
    def provide_session_settings(self, settings: Settings) -> SessionSettings:
        """Provide cookie and host settings."""
        return settings.session

    @provide
    def provide_store_settings(self, settings: Settings) -> StoreSettings:
        """Provide store retry settings."""
        return settings.store

    @provide
    def provide_invitation_settings(self, settings: Settings) -> InvitationSettings:
        """Provide invitation settings."""
        return settings.invitations

    @provide
    def provide_notification_settings(
        self, settings: Settings
    ) -> NotificationSettings:
        """Provide notification settings."""
        return settings.notifications

    @provide
    def provide_store_gateway(self, store_settings: StoreSettings) -> StoreGateway:
        """Provide the shared store retry gateway."""
        return StoreGateway(store_settings)
