"""Test configuration and fixtures."""

import os
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import logfire
import pytest

os.environ.setdefault("ENVIRONMENT", "test")

# Keep telemetry local; nothing in the test run is exported
logfire.configure(send_to_logfire=False, console=False)

from pavilion.domain.model import CredentialPayload, Gallery, Identity, Invite  # noqa: E402
from pavilion.domain.service.capability import full_access  # noqa: E402
from pavilion.domain.value import (  # noqa: E402
    CapabilityBundle,
    GalleryId,
    InviteCode,
    InviteId,
    InviteKind,
    InviteStatus,
    Role,
    UserId,
)

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_identity(
    email: str = "owner@example.com",
    role: Role = Role.OWNER,
    display_name: str = "Ada Lens",
    password_hash: str | None = None,
) -> Identity:
    """Helper to build an identity with a fresh ID."""
    return Identity(
        id=UserId(uuid4()),
        email=email,
        role=role,
        display_name=display_name,
        password_hash=password_hash,
    )


def make_gallery(owner: Identity, title: str = "Autumn Wedding") -> Gallery:
    """Helper to build a gallery owned by ``owner``."""
    return Gallery(
        id=GalleryId(uuid4()),
        owner_id=owner.id,
        title=title,
        description="Ceremony and reception",
    )


def make_invite(
    gallery: Gallery,
    code: str | None = None,
    kind: InviteKind = InviteKind.SINGLE_USE,
    max_usage: int | None = None,
    usage_count: int = 0,
    status: InviteStatus = InviteStatus.ACTIVE,
    expires_at: datetime | None = None,
    recipient_email: str | None = None,
    capabilities: CapabilityBundle | None = None,
    created_at: datetime | None = None,
) -> Invite:
    """Helper to build an invite for ``gallery``.

    Single-use invites get max_usage=1 regardless of the argument.
    """
    return Invite(
        id=InviteId(uuid4()),
        code=InviteCode(root=code or uuid4().hex[:12]),
        gallery_id=gallery.id,
        created_by=gallery.owner_id,
        recipient_email=recipient_email,
        kind=kind,
        status=status,
        capabilities=capabilities or CapabilityBundle(),
        usage_count=usage_count,
        max_usage=1 if kind == InviteKind.SINGLE_USE else max_usage,
        expires_at=expires_at,
        created_at=created_at or FIXED_NOW - timedelta(days=1),
    )


def make_credential(
    identity: Identity,
    role: Role | None = None,
    resource_id: GalleryId | None = None,
    permissions: CapabilityBundle | None = None,
) -> CredentialPayload:
    """Helper to build a verified credential for ``identity``."""
    role = role or identity.role
    return CredentialPayload(
        subject_id=str(identity.id),
        email=identity.email,
        role=role,
        owner_profile_id=identity.id if role == Role.OWNER else None,
        guest_profile_id=identity.id if role == Role.GUEST else None,
        resource_id=resource_id,
        permissions=permissions or full_access(),
        issued_at=FIXED_NOW,
        expires_at=FIXED_NOW + timedelta(days=7),
    )


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time for clock-dependent tests."""
    return FIXED_NOW
