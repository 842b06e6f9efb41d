"""PostgreSQL implementation of Identity repository."""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pavilion.domain.model import Identity
from pavilion.domain.repository import IdentityRepository
from pavilion.domain.value import UserId
from pavilion.persistence.mappers import identity_to_dict, row_to_identity
from pavilion.persistence.tables import users_table


class PostgresIdentityRepository(IdentityRepository):
    """PostgreSQL implementation of IdentityRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def _fetch_one(self, stmt) -> Optional[Identity]:
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
            return row_to_identity(dict(row)) if row else None

    async def find_by_id(self, user_id: UserId) -> Optional[Identity]:
        """Find an identity by ID."""
        stmt = select(users_table).where(users_table.c.id == user_id)
        return await self._fetch_one(stmt)

    async def find_by_email(self, email: str) -> Optional[Identity]:
        """Find an identity by normalized email."""
        stmt = select(users_table).where(users_table.c.email == email)
        return await self._fetch_one(stmt)

    async def save(self, identity: Identity) -> Identity:
        """Insert an identity, or update the stored one with the same email.

        Guest identities are created on first redemption; two concurrent
        redemptions with the same email converge on one row.

        Args:
            identity: Identity to save

        Returns:
            The persisted identity
        """
        insert_stmt = insert(users_table).values(**identity_to_dict(identity))
        stmt = insert_stmt.on_conflict_do_update(
            index_elements=[users_table.c.email],
            set_={
                "display_name": insert_stmt.excluded.display_name,
                # A guest upsert never drops an existing password
                "password_hash": func.coalesce(
                    insert_stmt.excluded.password_hash, users_table.c.password_hash
                ),
            },
        ).returning(*users_table.c)
        async with self.session_factory.begin() as session:
            result = await session.execute(stmt)
            row = result.mappings().one()
            return row_to_identity(dict(row))
