"""In-memory invite repository for testing."""

import asyncio
from datetime import datetime
from typing import Optional

from pavilion.domain.model.invite import Invite
from pavilion.domain.repository.invite import InviteRepository
from pavilion.domain.value import GalleryId, InviteCode, InviteId, InviteStatus
from pavilion.persistence.error import DuplicateCodeError
from pavilion.persistence.locking import KeyedLock


class InMemoryInviteRepository(InviteRepository):
    """In-memory implementation of InviteRepository for testing.

    Conditional updates are serialized per invite with a KeyedLock; the
    check and the mutation happen under the same lock, with a yield in
    between so concurrent callers really interleave.
    """

    def __init__(self) -> None:
        self._invites: dict[InviteId, Invite] = {}
        self._locks = KeyedLock()

    async def find_by_id(self, invite_id: InviteId) -> Optional[Invite]:
        """Find an invite by ID."""
        return self._invites.get(invite_id)

    async def find_by_code(self, code: InviteCode) -> Optional[Invite]:
        """Find an invite by its code."""
        for invite in self._invites.values():
            if invite.code == code:
                return invite
        return None

    async def find_latest_by_recipient_email(self, email: str) -> Optional[Invite]:
        """Find the newest invite for a recipient."""
        matches = [
            invite
            for invite in self._invites.values()
            if invite.recipient_email == email
        ]
        if not matches:
            return None
        return max(matches, key=lambda i: i.created_at)

    async def find_by_gallery(
        self, gallery_id: GalleryId, limit: int = 50, offset: int = 0
    ) -> list[Invite]:
        """Find invites for a gallery, newest first."""
        invites = [
            invite
            for invite in self._invites.values()
            if invite.gallery_id == gallery_id
        ]
        invites.sort(key=lambda i: i.created_at, reverse=True)
        return invites[offset : offset + limit]

    async def add(self, invite: Invite) -> Invite:
        """Insert a new invite."""
        if await self.find_by_code(invite.code):
            raise DuplicateCodeError(invite.code.root)
        self._invites[invite.id] = invite
        return invite

    async def redeem(self, invite_id: InviteId, now: datetime) -> Optional[Invite]:
        """Consume one redemption if the invite is still redeemable."""
        async with self._locks.hold(invite_id):
            invite = self._invites.get(invite_id)
            await asyncio.sleep(0)
            if invite is None or invite.status != InviteStatus.ACTIVE:
                return None
            if invite.expires_at is not None and invite.expires_at <= now:
                return None
            if invite.max_usage is not None and invite.usage_count >= invite.max_usage:
                return None
            updated = invite.model_copy(
                update={"usage_count": invite.usage_count + 1, "used_at": now}
            )
            self._invites[invite_id] = updated
            return updated

    async def revoke(self, invite_id: InviteId, now: datetime) -> Optional[Invite]:
        """Mark an invite revoked unless it already is."""
        async with self._locks.hold(invite_id):
            invite = self._invites.get(invite_id)
            await asyncio.sleep(0)
            if invite is None or invite.status == InviteStatus.REVOKED:
                return None
            updated = invite.model_copy(
                update={"status": InviteStatus.REVOKED, "revoked_at": now}
            )
            self._invites[invite_id] = updated
            return updated
