"""Identity aggregate root.

Owners and administrators sign in with a password. Guests are created the
first time they redeem an invite and never hold a password.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, field_validator

from pavilion.domain.model.common import DomainModel
from pavilion.domain.value import Role, UserId, normalize_email


class Identity(DomainModel):
    """An owner, administrator or guest known to the system."""

    id: UserId
    email: str
    role: Role
    display_name: str = Field(min_length=1, max_length=100)
    password_hash: Optional[str] = None  # Owners and admins only
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Store emails in canonical lowercase form."""
        return normalize_email(v)
