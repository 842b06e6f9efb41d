"""Gallery repository interface."""

from abc import ABC, abstractmethod

from pavilion.domain.model.gallery import Gallery
from pavilion.domain.value import GalleryId


class GalleryRepository(ABC):
    """Repository for Gallery entity.

    Galleries are managed outside the access core; this contract only
    covers the lookups the core needs plus a save used for seeding.
    """

    @abstractmethod
    async def find_by_id(self, gallery_id: GalleryId) -> Gallery | None:
        """Find a gallery by ID.

        Args:
            gallery_id: The gallery's unique identifier

        Returns:
            The gallery if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, gallery: Gallery) -> Gallery:
        """Save a gallery (create or update)."""
        pass
