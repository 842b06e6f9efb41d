"""PostgreSQL implementation of Invite repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, insert, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pavilion.domain.model import Invite
from pavilion.domain.repository import InviteRepository
from pavilion.domain.value import GalleryId, InviteCode, InviteId, InviteStatus
from pavilion.persistence.error import DuplicateCodeError
from pavilion.persistence.mappers import invite_to_dict, row_to_invite
from pavilion.persistence.tables import invites_table


class PostgresInviteRepository(InviteRepository):
    """PostgreSQL implementation of InviteRepository.

    Each method is its own transaction, so the store gateway can retry a
    failed call without replaying half of a unit of work.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def _fetch_one(self, stmt) -> Optional[Invite]:
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
            return row_to_invite(dict(row)) if row else None

    async def find_by_id(self, invite_id: InviteId) -> Optional[Invite]:
        """Find an invite by ID."""
        stmt = select(invites_table).where(invites_table.c.id == invite_id)
        return await self._fetch_one(stmt)

    async def find_by_code(self, code: InviteCode) -> Optional[Invite]:
        """Find an invite by its normalized code."""
        stmt = select(invites_table).where(invites_table.c.code == code.root)
        return await self._fetch_one(stmt)

    async def find_latest_by_recipient_email(self, email: str) -> Optional[Invite]:
        """Find the newest invite bound to a recipient email."""
        stmt = (
            select(invites_table)
            .where(invites_table.c.recipient_email == email)
            .order_by(invites_table.c.created_at.desc())
            .limit(1)
        )
        return await self._fetch_one(stmt)

    async def find_by_gallery(
        self, gallery_id: GalleryId, limit: int = 50, offset: int = 0
    ) -> list[Invite]:
        """Find invites for a gallery with pagination.

        Args:
            gallery_id: Gallery ID
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of invites, newest first
        """
        stmt = (
            select(invites_table)
            .where(invites_table.c.gallery_id == gallery_id)
            .order_by(invites_table.c.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
            return [row_to_invite(dict(row)) for row in rows]

    async def add(self, invite: Invite) -> Invite:
        """Insert a new invite.

        Raises:
            DuplicateCodeError: If the code is already taken
        """
        stmt = insert(invites_table).values(**invite_to_dict(invite))
        try:
            async with self.session_factory.begin() as session:
                await session.execute(stmt)
        except IntegrityError as e:
            if "code" in str(e.orig):
                raise DuplicateCodeError(invite.code.root) from e
            raise
        return invite

    async def redeem(self, invite_id: InviteId, now: datetime) -> Optional[Invite]:
        """Consume one redemption with a single conditional update.

        The WHERE clause carries the whole redeemability check, so two
        concurrent redemptions of the last unit cannot both match.
        """
        stmt = (
            update(invites_table)
            .where(
                and_(
                    invites_table.c.id == invite_id,
                    invites_table.c.status == InviteStatus.ACTIVE.value,
                    or_(
                        invites_table.c.expires_at.is_(None),
                        invites_table.c.expires_at > now,
                    ),
                    or_(
                        invites_table.c.max_usage.is_(None),
                        invites_table.c.usage_count < invites_table.c.max_usage,
                    ),
                )
            )
            .values(usage_count=invites_table.c.usage_count + 1, used_at=now)
            .returning(*invites_table.c)
        )
        async with self.session_factory.begin() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
            return row_to_invite(dict(row)) if row else None

    async def revoke(self, invite_id: InviteId, now: datetime) -> Optional[Invite]:
        """Mark an invite revoked unless it already is."""
        stmt = (
            update(invites_table)
            .where(
                and_(
                    invites_table.c.id == invite_id,
                    invites_table.c.status != InviteStatus.REVOKED.value,
                )
            )
            .values(status=InviteStatus.REVOKED.value, revoked_at=now)
            .returning(*invites_table.c)
        )
        async with self.session_factory.begin() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
            return row_to_invite(dict(row)) if row else None
