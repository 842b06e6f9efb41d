"""Domain value objects for Gallery Pavilion."""

from pavilion.domain.value.identifiers import GalleryId, InviteId, UserId
from pavilion.domain.value.types import (
    Capability,
    CapabilityBundle,
    InviteCode,
    InviteKind,
    InviteStatus,
    Role,
    normalize_email,
)

__all__ = [
    # Identifiers
    "UserId",
    "GalleryId",
    "InviteId",
    # Types
    "Capability",
    "CapabilityBundle",
    "InviteCode",
    "InviteKind",
    "InviteStatus",
    "Role",
    "normalize_email",
]
