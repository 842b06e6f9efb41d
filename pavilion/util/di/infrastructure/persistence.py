"""Persistence infrastructure providers."""

from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from pavilion.config import Settings
from pavilion.domain.repository import (
    GalleryRepository,
    IdentityRepository,
    InviteRepository,
)
from pavilion.persistence.database import create_engine, create_session_factory
from pavilion.persistence.repository import (
    PostgresGalleryRepository,
    PostgresIdentityRepository,
    PostgresInviteRepository,
)
from pavilion.util.di.base import ProviderBase
from pavilion.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL.

    Repositories hold only the session factory and open one transaction
    per call, so they are shared at APP scope.
    """

    __is_mock__ = False

    scope = Scope.APP

    @provide
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide database engine."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        return engine

    @provide
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide
    def get_identity_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> IdentityRepository:
        """Provide Identity repository."""
        return PostgresIdentityRepository(session_factory)

    @provide
    def get_gallery_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> GalleryRepository:
        """Provide Gallery repository."""
        return PostgresGalleryRepository(session_factory)

    @provide
    def get_invite_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> InviteRepository:
        """Provide Invite repository."""
        return PostgresInviteRepository(session_factory)
