"""Unit tests for the capability rules."""

from datetime import timedelta
from itertools import product

import pytest

from pavilion.domain.service.capability import (
    derive_capabilities,
    effective_status,
    full_access,
    has_remaining_uses,
    is_effectively_accessible,
    is_expired,
)
from pavilion.domain.value import Capability, CapabilityBundle, InviteKind, InviteStatus
from tests.conftest import FIXED_NOW, make_gallery, make_identity, make_invite

FLAGS = [
    "can_view",
    "can_favorite",
    "can_comment",
    "can_download",
    "can_request_purchase",
]


@pytest.fixture
def gallery():
    return make_gallery(make_identity())


class TestDeriveCapabilities:
    """derive_capabilities copies the invite's bundle exactly."""

    @pytest.mark.parametrize("values", list(product([True, False], repeat=5)))
    def test_every_flag_combination_is_preserved(self, gallery, values):
        """Each of the 32 flag combinations should come through unchanged."""
        # Arrange
        bundle = CapabilityBundle(**dict(zip(FLAGS, values)))
        invite = make_invite(gallery, capabilities=bundle)

        # Act
        derived = derive_capabilities(invite)

        # Assert
        assert derived == bundle
        assert derived.is_subset_of(invite.capabilities)

    def test_view_only_invite_grants_nothing_else(self, gallery):
        """A view-only invite must not grant download."""
        # Arrange
        invite = make_invite(
            gallery,
            capabilities=CapabilityBundle(
                can_view=True,
                can_favorite=False,
                can_comment=False,
                can_download=False,
                can_request_purchase=False,
            ),
        )

        # Act
        derived = derive_capabilities(invite)

        # Assert
        assert derived.granted() == {Capability.VIEW}
        assert not derived.allows(Capability.DOWNLOAD)

    def test_defaults(self):
        """Default bundle: view, favorite and purchase requests only."""
        assert CapabilityBundle().granted() == {
            Capability.VIEW,
            Capability.FAVORITE,
            Capability.REQUEST_PURCHASE,
        }

    def test_full_access_grants_everything(self):
        """Owners and admins get every capability."""
        assert full_access().granted() == set(Capability)


class TestExpiry:
    """Expiry is derived from expires_at at evaluation time."""

    def test_no_expiry_never_expires(self, gallery):
        invite = make_invite(gallery, expires_at=None)
        assert not is_expired(invite, FIXED_NOW + timedelta(days=3650))

    def test_expires_at_boundary_is_expired(self, gallery):
        """An invite is expired at exactly expires_at."""
        invite = make_invite(gallery, expires_at=FIXED_NOW)
        assert is_expired(invite, FIXED_NOW)
        assert not is_expired(invite, FIXED_NOW - timedelta(seconds=1))

    def test_effective_status_reports_expired(self, gallery):
        """A stored-active invite past its expiry is observed as expired."""
        invite = make_invite(gallery, expires_at=FIXED_NOW - timedelta(minutes=1))

        assert invite.status == InviteStatus.ACTIVE
        assert effective_status(invite, FIXED_NOW) == InviteStatus.EXPIRED

    def test_revoked_wins_over_expired(self, gallery):
        invite = make_invite(
            gallery,
            status=InviteStatus.REVOKED,
            expires_at=FIXED_NOW - timedelta(minutes=1),
        )
        assert effective_status(invite, FIXED_NOW) == InviteStatus.REVOKED


class TestRemainingUses:
    """Usage limits."""

    def test_unlimited_multi_use_always_has_uses(self, gallery):
        invite = make_invite(
            gallery, kind=InviteKind.MULTI_USE, max_usage=None, usage_count=500
        )
        assert has_remaining_uses(invite)

    def test_consumed_single_use_has_none(self, gallery):
        invite = make_invite(gallery, usage_count=1)
        assert not has_remaining_uses(invite)

    def test_multi_use_at_limit_has_none(self, gallery):
        invite = make_invite(
            gallery, kind=InviteKind.MULTI_USE, max_usage=3, usage_count=3
        )
        assert not has_remaining_uses(invite)


class TestEffectiveAccess:
    """is_effectively_accessible combines status, expiry and usage."""

    @pytest.mark.parametrize(
        "status, expired, exhausted, expected",
        [
            (InviteStatus.ACTIVE, False, False, True),
            (InviteStatus.ACTIVE, True, False, False),
            (InviteStatus.ACTIVE, False, True, False),
            (InviteStatus.REVOKED, False, False, False),
            (InviteStatus.PENDING, False, False, False),
        ],
    )
    def test_accessibility(self, gallery, status, expired, exhausted, expected):
        # Arrange
        invite = make_invite(
            gallery,
            kind=InviteKind.MULTI_USE,
            max_usage=2,
            usage_count=2 if exhausted else 1,
            status=status,
            expires_at=FIXED_NOW - timedelta(hours=1)
            if expired
            else FIXED_NOW + timedelta(hours=1),
        )

        # Act & Assert
        assert is_effectively_accessible(invite, FIXED_NOW) is expected
