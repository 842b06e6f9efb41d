"""PostgreSQL implementation of Gallery repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pavilion.domain.model import Gallery
from pavilion.domain.repository import GalleryRepository
from pavilion.domain.value import GalleryId
from pavilion.persistence.mappers import gallery_to_dict, row_to_gallery
from pavilion.persistence.tables import galleries_table


class PostgresGalleryRepository(GalleryRepository):
    """PostgreSQL implementation of GalleryRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def find_by_id(self, gallery_id: GalleryId) -> Optional[Gallery]:
        """Find a gallery by ID.

        Args:
            gallery_id: Gallery ID to look up

        Returns:
            Gallery if found, None otherwise
        """
        stmt = select(galleries_table).where(galleries_table.c.id == gallery_id)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
            return row_to_gallery(dict(row)) if row else None

    async def save(self, gallery: Gallery) -> Gallery:
        """Insert or update a gallery."""
        values = gallery_to_dict(gallery)
        stmt = (
            insert(galleries_table)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[galleries_table.c.id],
                set_={
                    "title": values["title"],
                    "description": values["description"],
                },
            )
        )
        async with self.session_factory.begin() as session:
            await session.execute(stmt)
        return gallery
