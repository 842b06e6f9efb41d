"""Unit tests for provider selection and the test container."""

import pytest

from pavilion.adapter.notification.client import MockNotificationClient
from pavilion.domain.repository import InviteRepository
from pavilion.domain.service import InviteService, NotificationClient
from pavilion.persistence.repository.inmemory import InMemoryInviteRepository
from pavilion.util.di import (
    NotificationProvider,
    PersistenceProvider,
    ProdConfigProvider,
    ProdNotificationProvider,
    ProdPersistenceProvider,
    ProviderBase,
    get_provider,
)
from pavilion.util.error import DependencyInjectionError
from tests.di import (
    MockNotificationProvider,
    MockPersistenceProvider,
    build_test_container,
)


class TestGetProvider:
    def test_concrete_provider_is_returned_as_is(self):
        assert get_provider(ProdConfigProvider) is ProdConfigProvider

    def test_mockable_component_selection(self):
        assert get_provider(PersistenceProvider) is ProdPersistenceProvider
        assert get_provider(PersistenceProvider, use_mock=True) is MockPersistenceProvider
        assert get_provider(NotificationProvider) is ProdNotificationProvider
        assert (
            get_provider(NotificationProvider, use_mock=True)
            is MockNotificationProvider
        )

    def test_missing_mock_implementation_is_reported(self):
        class AuditProvider(ProviderBase):
            __mock_component__ = "notification"

        class ProdAuditProvider(AuditProvider):
            __is_mock__ = False

        with pytest.raises(DependencyInjectionError, match="No mock implementation"):
            get_provider(AuditProvider, use_mock=True)


class TestBuildTestContainer:
    def test_unknown_component_is_rejected(self):
        with pytest.raises(ValueError, match="Unknown components"):
            build_test_container(unmock={"mailer"})

    @pytest.mark.asyncio
    async def test_mocks_are_wired_and_shared(self):
        # Arrange
        container = build_test_container()

        # Act
        async with container() as request_container:
            repo = await request_container.get(InviteRepository)
            client = await request_container.get(NotificationClient)
            service = await request_container.get(InviteService)

        # Assert
        assert isinstance(repo, InMemoryInviteRepository)
        assert isinstance(client, MockNotificationClient)
        assert service.invite_repository is repo
        assert service.notification_client is client
        await container.close()
