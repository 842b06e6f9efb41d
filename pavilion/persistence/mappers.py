"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from pavilion.domain.model import Gallery, Identity, Invite
from pavilion.domain.value import (
    CapabilityBundle,
    GalleryId,
    InviteCode,
    InviteId,
    InviteKind,
    InviteStatus,
    Role,
    UserId,
)

# Legacy status values that are re-derived from expires_at / usage_count
_LEGACY_STATUSES = {"expired", "used"}


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_identity(row: Dict[str, Any]) -> Identity:
    """Convert database row to Identity domain model.

    Args:
        row: Database row as dict

    Returns:
        Identity domain model
    """
    return Identity(
        id=UserId(_uuid(row["id"])),
        email=row["email"],
        role=Role(row["role"]),
        display_name=row["display_name"],
        password_hash=row.get("password_hash"),
        created_at=row["created_at"],
    )


def identity_to_dict(identity: Identity) -> Dict[str, Any]:
    """Convert Identity domain model to database dict."""
    return {
        "id": identity.id,
        "email": identity.email,
        "role": identity.role.value,
        "display_name": identity.display_name,
        "password_hash": identity.password_hash,
        "created_at": identity.created_at,
    }


def row_to_gallery(row: Dict[str, Any]) -> Gallery:
    """Convert database row to Gallery domain model."""
    return Gallery(
        id=GalleryId(_uuid(row["id"])),
        owner_id=UserId(_uuid(row["owner_id"])),
        title=row["title"],
        description=row.get("description"),
        created_at=row["created_at"],
    )


def gallery_to_dict(gallery: Gallery) -> Dict[str, Any]:
    """Convert Gallery domain model to database dict."""
    return gallery.model_dump()


def row_to_invite(row: Dict[str, Any]) -> Invite:
    """Convert database row to Invite domain model.

    Legacy ``expired`` and ``used`` statuses are read as active: expiry is
    re-derived from expires_at and usage from usage_count.

    Args:
        row: Database row as dict

    Returns:
        Invite domain model
    """
    kind = InviteKind(row["kind"])
    raw_status = row["status"]
    usage_count = row["usage_count"]
    max_usage = row.get("max_usage")

    if kind == InviteKind.SINGLE_USE:
        max_usage = 1
        # A consumed single-use invite stays consumed
        if raw_status == "used":
            usage_count = max(usage_count, 1)
        usage_count = min(usage_count, 1)

    status = (
        InviteStatus.ACTIVE
        if raw_status in _LEGACY_STATUSES
        else InviteStatus(raw_status)
    )

    return Invite(
        id=InviteId(_uuid(row["id"])),
        code=InviteCode(root=row["code"]),
        gallery_id=GalleryId(_uuid(row["gallery_id"])),
        created_by=UserId(_uuid(row["created_by"])),
        recipient_email=row.get("recipient_email"),
        kind=kind,
        status=status,
        capabilities=CapabilityBundle(
            can_view=row["can_view"],
            can_favorite=row["can_favorite"],
            can_comment=row["can_comment"],
            can_download=row["can_download"],
            can_request_purchase=row["can_request_purchase"],
        ),
        usage_count=usage_count,
        max_usage=max_usage,
        expires_at=row.get("expires_at"),
        created_at=row["created_at"],
        used_at=row.get("used_at"),
        revoked_at=row.get("revoked_at"),
    )


def invite_to_dict(invite: Invite) -> Dict[str, Any]:
    """Convert Invite domain model to database dict.

    The capability bundle is flattened into one boolean column per flag.

    Args:
        invite: Invite domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return {
        "id": invite.id,
        "code": invite.code.root,
        "gallery_id": invite.gallery_id,
        "created_by": invite.created_by,
        "recipient_email": invite.recipient_email,
        "kind": invite.kind.value,
        "status": invite.status.value,
        **invite.capabilities.model_dump(),
        "usage_count": invite.usage_count,
        "max_usage": invite.max_usage,
        "expires_at": invite.expires_at,
        "created_at": invite.created_at,
        "used_at": invite.used_at,
        "revoked_at": invite.revoked_at,
    }
