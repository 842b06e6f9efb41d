"""Unit tests for IdentityService."""

from uuid import uuid4

import pytest

from pavilion.domain.error import NotFoundError, UnauthenticatedError, ValidationError
from pavilion.domain.repository import IdentityRepository
from pavilion.domain.service import IdentityService
from pavilion.domain.value import Role, UserId
from pavilion.util.password import hash_password
from tests.conftest import make_identity
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestAuthenticate:
    """Password login for owners and admins."""

    @pytest.mark.asyncio
    async def test_correct_password(self, unit_env):
        # Arrange
        service = await unit_env.get(IdentityService)
        repo = await unit_env.get(IdentityRepository)
        owner = await repo.save(
            make_identity(password_hash=hash_password("darkroom-42"))
        )

        # Act
        identity = await service.authenticate("owner@example.com", "darkroom-42")

        # Assert
        assert identity.id == owner.id
        assert identity.role == Role.OWNER

    @pytest.mark.asyncio
    async def test_wrong_password(self, unit_env):
        service = await unit_env.get(IdentityService)
        repo = await unit_env.get(IdentityRepository)
        await repo.save(make_identity(password_hash=hash_password("darkroom-42")))

        with pytest.raises(UnauthenticatedError):
            await service.authenticate("owner@example.com", "wrong")

    @pytest.mark.asyncio
    async def test_unknown_email(self, unit_env):
        service = await unit_env.get(IdentityService)

        with pytest.raises(UnauthenticatedError):
            await service.authenticate("nobody@example.com", "anything")

    @pytest.mark.asyncio
    async def test_guest_cannot_use_password_login(self, unit_env):
        """Even a guest record with a hash is refused."""
        service = await unit_env.get(IdentityService)
        repo = await unit_env.get(IdentityRepository)
        await repo.save(
            make_identity(
                email="guest@example.com",
                role=Role.GUEST,
                password_hash=hash_password("guessable"),
            )
        )

        with pytest.raises(UnauthenticatedError):
            await service.authenticate("guest@example.com", "guessable")


class TestResolveGuest:
    """Guest provisioning on redemption."""

    @pytest.mark.asyncio
    async def test_creates_guest_once(self, unit_env):
        # Arrange
        service = await unit_env.get(IdentityService)

        # Act
        first = await service.resolve_guest("guest@example.com", "guest")
        second = await service.resolve_guest("guest@example.com", "someone else")

        # Assert
        assert first.role == Role.GUEST
        assert first.password_hash is None
        assert second.id == first.id
        assert second.display_name == "guest"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [Role.OWNER, Role.ADMIN])
    async def test_account_email_is_refused(self, unit_env, role):
        """A guest credential never takes over an owner or admin identity."""
        # Arrange
        service = await unit_env.get(IdentityService)
        repo = await unit_env.get(IdentityRepository)
        account = await repo.save(
            make_identity(role=role, password_hash=hash_password("secret"))
        )

        # Act & Assert
        with pytest.raises(ValidationError):
            await service.resolve_guest("owner@example.com", "owner")

        stored = await repo.find_by_email("owner@example.com")
        assert stored == account

    @pytest.mark.asyncio
    async def test_create_guest_mints_distinct_identities(self, unit_env):
        service = await unit_env.get(IdentityService)

        first = await service.create_guest("guest-a@guests.invalid", "Guest")
        second = await service.create_guest("guest-b@guests.invalid", "Guest")

        assert first.id != second.id
        assert {first.role, second.role} == {Role.GUEST}


class TestGetById:
    @pytest.mark.asyncio
    async def test_unknown_id(self, unit_env):
        service = await unit_env.get(IdentityService)

        with pytest.raises(NotFoundError):
            await service.get_by_id(UserId(uuid4()))
