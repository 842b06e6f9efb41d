"""Invite repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from pavilion.domain.model.invite import Invite
from pavilion.domain.value import GalleryId, InviteCode, InviteId


class InviteRepository(ABC):
    """Repository for Invite entity.

    Defines the contract for invite persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, invite_id: InviteId) -> Invite | None:
        """Find an invite by ID.

        Args:
            invite_id: The invite's unique identifier

        Returns:
            The invite if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_code(self, code: InviteCode) -> Invite | None:
        """Find an invite by its normalized code.

        Args:
            code: The invite code

        Returns:
            The invite if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_latest_by_recipient_email(self, email: str) -> Invite | None:
        """Find the most recently created invite bound to an email.

        Args:
            email: Normalized recipient email

        Returns:
            The newest invite for that recipient, None if there is none
        """
        pass

    @abstractmethod
    async def find_by_gallery(
        self, gallery_id: GalleryId, limit: int = 50, offset: int = 0
    ) -> list[Invite]:
        """Find invites for a gallery, newest first.

        Args:
            gallery_id: The gallery's ID
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of invites
        """
        pass

    @abstractmethod
    async def add(self, invite: Invite) -> Invite:
        """Persist a new invite.

        Args:
            invite: The invite to insert

        Returns:
            The saved invite

        Raises:
            IntegrityError: If the code is already taken
        """
        pass

    @abstractmethod
    async def redeem(self, invite_id: InviteId, now: datetime) -> Invite | None:
        """Atomically consume one redemption.

        The redeemability check and the mutation are a single conditional
        update: usage_count is incremented and used_at set only if the invite
        is active, unexpired at ``now`` and below max_usage. Concurrent calls
        for the same invite serialize on the store.

        Args:
            invite_id: The invite to redeem
            now: Evaluation time for the expiry check and used_at

        Returns:
            The updated invite, or None if the condition did not hold
        """
        pass

    @abstractmethod
    async def revoke(self, invite_id: InviteId, now: datetime) -> Invite | None:
        """Atomically mark an invite revoked.

        Args:
            invite_id: The invite to revoke
            now: Revocation time

        Returns:
            The updated invite, or None if it was missing or already revoked
        """
        pass
