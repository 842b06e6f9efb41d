"""Repository interfaces for Gallery Pavilion domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from pavilion.domain.repository.gallery import GalleryRepository
from pavilion.domain.repository.identity import IdentityRepository
from pavilion.domain.repository.invite import InviteRepository

__all__ = [
    "GalleryRepository",
    "IdentityRepository",
    "InviteRepository",
]
