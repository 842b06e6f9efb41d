"""Domain model entities for Gallery Pavilion."""

from pavilion.domain.model.credential import CredentialClaims, CredentialPayload
from pavilion.domain.model.gallery import Gallery
from pavilion.domain.model.identity import Identity
from pavilion.domain.model.invite import Invite

__all__ = [
    "CredentialClaims",
    "CredentialPayload",
    "Gallery",
    "Identity",
    "Invite",
]
