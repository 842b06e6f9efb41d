"""PostgreSQL repository implementations."""

from pavilion.persistence.repository.gallery import PostgresGalleryRepository
from pavilion.persistence.repository.identity import PostgresIdentityRepository
from pavilion.persistence.repository.invite import PostgresInviteRepository

__all__ = [
    "PostgresGalleryRepository",
    "PostgresIdentityRepository",
    "PostgresInviteRepository",
]
