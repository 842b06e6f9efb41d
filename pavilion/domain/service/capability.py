"""Capability rules.

Pure functions mapping invites to runtime permissions. Nothing here
touches storage or the clock; callers pass ``now`` explicitly.
"""

from datetime import datetime

from pavilion.domain.model.invite import Invite
from pavilion.domain.value import CapabilityBundle, InviteStatus


def derive_capabilities(invite: Invite) -> CapabilityBundle:
    """Permissions granted by redeeming an invite.

    A guest never receives more than the invite's stored bundle.
    """
    return invite.capabilities.model_copy()


def is_expired(invite: Invite, now: datetime) -> bool:
    """True once expires_at is at or before ``now``."""
    return invite.expires_at is not None and invite.expires_at <= now


def has_remaining_uses(invite: Invite) -> bool:
    """True while usage_count is below max_usage (or there is no limit)."""
    return invite.max_usage is None or invite.usage_count < invite.max_usage


def is_effectively_accessible(invite: Invite, now: datetime) -> bool:
    """Whether an invite can still be redeemed at ``now``."""
    return (
        invite.status == InviteStatus.ACTIVE
        and not is_expired(invite, now)
        and has_remaining_uses(invite)
    )


def effective_status(invite: Invite, now: datetime) -> InviteStatus:
    """Observed status, reporting EXPIRED once expires_at has passed.

    Revoked wins over expired: revocation is the terminal state an owner
    chose explicitly.
    """
    if invite.status == InviteStatus.REVOKED:
        return InviteStatus.REVOKED
    if is_expired(invite, now):
        return InviteStatus.EXPIRED
    return invite.status


def full_access() -> CapabilityBundle:
    """Bundle minted for owners and administrators."""
    return CapabilityBundle(
        can_view=True,
        can_favorite=True,
        can_comment=True,
        can_download=True,
        can_request_purchase=True,
    )
