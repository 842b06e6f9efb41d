"""Identity repository interface."""

from abc import ABC, abstractmethod

from pavilion.domain.model.identity import Identity
from pavilion.domain.value import UserId


class IdentityRepository(ABC):
    """Repository for Identity aggregate."""

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Identity | None:
        """Find an identity by ID.

        Args:
            user_id: The identity's unique identifier

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Identity | None:
        """Find an identity by normalized email.

        Args:
            email: Lowercased email address

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, identity: Identity) -> Identity:
        """Save an identity (create or update).

        Identities are unique by email: saving an identity whose email is
        already stored updates that record and returns it.

        Returns:
            The persisted identity, which may carry the stored ID
        """
        pass
