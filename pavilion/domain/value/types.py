"""Domain value objects for Gallery Pavilion.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from enum import Enum

from pydantic import field_validator

from pavilion.domain.value.common import RootValueObject, ValueObject


class Role(str, Enum):
    """Role carried by an identity and by every credential."""

    OWNER = "owner"
    ADMIN = "admin"
    GUEST = "guest"


class InviteKind(str, Enum):
    """Redemption cardinality of an invite."""

    SINGLE_USE = "single_use"
    MULTI_USE = "multi_use"


class InviteStatus(str, Enum):
    """Status of an invite.

    EXPIRED is an observed state derived from ``expires_at``. It is reported
    by ``effective_status`` but never written to storage.
    """

    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


class Capability(str, Enum):
    """Fine-grained permissions a credential can grant."""

    VIEW = "view"
    FAVORITE = "favorite"
    COMMENT = "comment"
    DOWNLOAD = "download"
    REQUEST_PURCHASE = "request_purchase"


class CapabilityBundle(ValueObject):
    """Five independent permission flags granted to a session."""

    can_view: bool = True
    can_favorite: bool = True
    can_comment: bool = False
    can_download: bool = False
    can_request_purchase: bool = True

    def allows(self, capability: Capability) -> bool:
        """Check whether a single capability is granted."""
        match capability:
            case Capability.VIEW:
                return self.can_view
            case Capability.FAVORITE:
                return self.can_favorite
            case Capability.COMMENT:
                return self.can_comment
            case Capability.DOWNLOAD:
                return self.can_download
            case Capability.REQUEST_PURCHASE:
                return self.can_request_purchase

    def granted(self) -> set[Capability]:
        """Return the set of granted capabilities."""
        return {capability for capability in Capability if self.allows(capability)}

    def is_subset_of(self, other: "CapabilityBundle") -> bool:
        """True when every capability granted here is also granted by ``other``."""
        return self.granted() <= other.granted()


class InviteCode(RootValueObject[str]):
    """Opaque invite code.

    Codes are case-normalized: surrounding whitespace is dropped and the
    value is lowercased, so ``AbC123`` and ``abc123`` address the same invite.
    """

    @field_validator("root")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        """Lowercase and validate the code."""
        v = v.strip().lower()
        if not re.match(r"^[a-z0-9_-]{4,64}$", v):
            raise ValueError("Invite code must be 4-64 URL-safe characters")
        return v


def normalize_email(email: str) -> str:
    """Canonical form used for email comparisons and lookups."""
    email = email.strip().lower()
    if not re.match(r"^[^\s@]+@[^\s@]+\.[^\s@]+$", email):
        raise ValueError("Please provide a valid email")
    return email
