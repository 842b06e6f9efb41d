"""In-memory identity repository for testing."""

from typing import Optional

from pavilion.domain.model.identity import Identity
from pavilion.domain.repository.identity import IdentityRepository
from pavilion.domain.value import UserId


class InMemoryIdentityRepository(IdentityRepository):
    """In-memory implementation of IdentityRepository for testing."""

    def __init__(self) -> None:
        self._identities: dict[str, Identity] = {}  # Keyed by email

    async def find_by_id(self, user_id: UserId) -> Optional[Identity]:
        """Find an identity by ID."""
        for identity in self._identities.values():
            if identity.id == user_id:
                return identity
        return None

    async def find_by_email(self, email: str) -> Optional[Identity]:
        """Find an identity by email."""
        return self._identities.get(email)

    async def save(self, identity: Identity) -> Identity:
        """Save an identity, merging into an existing one with the same email."""
        existing = self._identities.get(identity.email)
        if existing is not None:
            identity = existing.model_copy(
                update={
                    "display_name": identity.display_name,
                    "password_hash": identity.password_hash or existing.password_hash,
                }
            )
        self._identities[identity.email] = identity
        return identity
