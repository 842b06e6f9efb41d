"""In-memory repository implementations for testing."""

from .gallery import InMemoryGalleryRepository
from .identity import InMemoryIdentityRepository
from .invite import InMemoryInviteRepository

__all__ = [
    "InMemoryGalleryRepository",
    "InMemoryIdentityRepository",
    "InMemoryInviteRepository",
]
