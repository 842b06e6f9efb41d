"""In-memory gallery repository for testing."""

from typing import Optional

from pavilion.domain.model.gallery import Gallery
from pavilion.domain.repository.gallery import GalleryRepository
from pavilion.domain.value import GalleryId


class InMemoryGalleryRepository(GalleryRepository):
    """In-memory implementation of GalleryRepository for testing."""

    def __init__(self) -> None:
        self._galleries: dict[GalleryId, Gallery] = {}

    async def find_by_id(self, gallery_id: GalleryId) -> Optional[Gallery]:
        """Find a gallery by ID."""
        return self._galleries.get(gallery_id)

    async def save(self, gallery: Gallery) -> Gallery:
        """Save a gallery."""
        self._galleries[gallery.id] = gallery
        return gallery
