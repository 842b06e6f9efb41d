"""Identity domain service."""

from uuid import uuid4

import logfire

from pavilion.domain.error import NotFoundError, UnauthenticatedError, ValidationError
from pavilion.domain.model.identity import Identity
from pavilion.domain.repository import IdentityRepository
from pavilion.domain.value import Role, UserId
from pavilion.persistence.gateway import StoreGateway
from pavilion.util.password import verify_password

from .base import Service


class IdentityService(Service):
    """Looks up, authenticates and provisions identities."""

    def __init__(
        self, identity_repository: IdentityRepository, gateway: StoreGateway
    ) -> None:
        """Initialize identity service.

        Args:
            identity_repository: Identity repository
            gateway: Retry wrapper for store calls
        """
        self.identity_repository = identity_repository
        self.gateway = gateway

    async def get_by_id(self, user_id: UserId) -> Identity:
        """Get an identity by ID.

        Raises:
            NotFoundError: If no identity has this ID
        """
        identity = await self.gateway.run(
            lambda: self.identity_repository.find_by_id(user_id),
            name="identity.find_by_id",
        )
        if identity is None:
            raise NotFoundError("Identity", str(user_id))
        return identity

    async def find_by_email(self, email: str) -> Identity | None:
        """Find an identity by normalized email."""
        return await self.gateway.run(
            lambda: self.identity_repository.find_by_email(email),
            name="identity.find_by_email",
        )

    async def authenticate(self, email: str, password: str) -> Identity:
        """Check an owner or admin password.

        The error does not say whether the email or the password was wrong.

        Args:
            email: Normalized email
            password: Plain-text password

        Returns:
            The authenticated identity

        Raises:
            UnauthenticatedError: If the credentials do not match a
                password-holding owner or admin
        """
        with logfire.span("identity_service.authenticate", email=email):
            identity = await self.find_by_email(email)
            if (
                identity is None
                or identity.role == Role.GUEST
                or identity.password_hash is None
                or not verify_password(password, identity.password_hash)
            ):
                logfire.warn("Password login rejected", email=email)
                raise UnauthenticatedError("Invalid email or password")

            logfire.info(
                "Password login accepted",
                user_id=str(identity.id),
                role=identity.role.value,
            )
            return identity

    async def resolve_guest(self, email: str, display_name: str) -> Identity:
        """Find the guest identity for an email, creating it if there is none.

        Only guest identities are reused. An email that belongs to an owner
        or admin is refused: a guest credential never carries their subject.

        Args:
            email: Normalized email
            display_name: Name for a newly created guest

        Returns:
            The existing or newly created guest identity

        Raises:
            ValidationError: If the email belongs to an owner or admin
        """
        with logfire.span("identity_service.resolve_guest"):
            existing = await self.find_by_email(email)
            if existing is None:
                existing = await self.create_guest(email, display_name)
            if existing.role != Role.GUEST:
                logfire.warn(
                    "Guest redemption with an account email refused",
                    user_id=str(existing.id),
                    role=existing.role.value,
                )
                raise ValidationError(
                    "This email belongs to a gallery account; sign in instead"
                )
            return existing

    async def create_guest(self, email: str, display_name: str) -> Identity:
        """Store a new guest identity.

        Args:
            email: Normalized email, or a unique placeholder for anonymous guests
            display_name: Name shown for the guest

        Returns:
            The persisted identity; an existing row with the same email wins
        """
        guest = Identity(
            id=UserId(uuid4()),
            email=email,
            role=Role.GUEST,
            display_name=display_name[:100],
        )
        saved = await self.gateway.run(
            lambda: self.identity_repository.save(guest),
            name="identity.save",
        )
        if saved.id == guest.id:
            logfire.info("Guest identity created", user_id=str(saved.id))
        return saved
