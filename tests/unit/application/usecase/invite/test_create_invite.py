"""Unit tests for the owner-facing invite use cases."""

from uuid import uuid4

import pytest

from pavilion.application.usecase.invite import (
    CreateInviteRequest,
    CreateInviteUseCase,
    ListInvitesRequest,
    ListInvitesUseCase,
    PreviewInviteRequest,
    PreviewInviteUseCase,
    ResendInviteRequest,
    ResendInviteUseCase,
    RevokeInviteRequest,
    RevokeInviteUseCase,
)
from pavilion.domain.error import InviteAlreadyRevokedError, NotFoundError
from pavilion.domain.repository import GalleryRepository, IdentityRepository
from pavilion.domain.service import NotificationClient
from pavilion.domain.value import CapabilityBundle, InviteKind, InviteStatus
from tests.conftest import make_credential, make_gallery, make_identity
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


async def seed(env):
    identity_repo = await env.get(IdentityRepository)
    gallery_repo = await env.get(GalleryRepository)
    owner = await identity_repo.save(make_identity())
    gallery = await gallery_repo.save(make_gallery(owner))
    return make_credential(owner), gallery


class TestCreateInvite:
    @pytest.mark.asyncio
    async def test_response_has_link_and_view(self, unit_env):
        # Arrange
        use_case = await unit_env.get(CreateInviteUseCase)
        caller, gallery = await seed(unit_env)

        # Act
        response = await use_case.execute(
            CreateInviteRequest(
                caller=caller,
                gallery_id=gallery.id,
                recipient_email="guest@example.com",
                kind=InviteKind.MULTI_USE,
                max_usage=3,
            )
        )

        # Assert
        assert response.access_url.endswith(f"/invite?code={response.code}")
        assert response.invite.code == response.code
        assert response.invite.status == InviteStatus.ACTIVE
        assert response.invite.max_usage == 3
        assert response.email_sent is True

    @pytest.mark.asyncio
    async def test_unknown_gallery(self, unit_env):
        use_case = await unit_env.get(CreateInviteUseCase)
        caller, _ = await seed(unit_env)

        with pytest.raises(NotFoundError):
            await use_case.execute(
                CreateInviteRequest(caller=caller, gallery_id=uuid4())
            )


class TestPreviewInvite:
    @pytest.mark.asyncio
    async def test_preview_shows_gallery_and_capabilities(self, unit_env):
        # Arrange
        create = await unit_env.get(CreateInviteUseCase)
        preview = await unit_env.get(PreviewInviteUseCase)
        caller, gallery = await seed(unit_env)
        created = await create.execute(
            CreateInviteRequest(
                caller=caller,
                gallery_id=gallery.id,
                capabilities=CapabilityBundle(can_comment=True),
            )
        )

        # Act
        response = await preview.execute(PreviewInviteRequest(code=created.code))

        # Assert
        assert response.gallery.title == gallery.title
        assert response.capabilities.can_comment is True
        assert response.invite.remaining_uses == 1


class TestRevokeAndResend:
    @pytest.mark.asyncio
    async def test_revoke_twice(self, unit_env):
        create = await unit_env.get(CreateInviteUseCase)
        revoke = await unit_env.get(RevokeInviteUseCase)
        caller, gallery = await seed(unit_env)
        created = await create.execute(
            CreateInviteRequest(caller=caller, gallery_id=gallery.id)
        )
        invite_id = created.invite.id

        response = await revoke.execute(
            RevokeInviteRequest(caller=caller, invite_id=invite_id)
        )

        assert response.status == InviteStatus.REVOKED
        assert response.invite.revoked_at is not None
        with pytest.raises(InviteAlreadyRevokedError):
            await revoke.execute(RevokeInviteRequest(caller=caller, invite_id=invite_id))

    @pytest.mark.asyncio
    async def test_resend_reports_status(self, unit_env):
        create = await unit_env.get(CreateInviteUseCase)
        resend = await unit_env.get(ResendInviteUseCase)
        client = await unit_env.get(NotificationClient)
        caller, gallery = await seed(unit_env)
        created = await create.execute(
            CreateInviteRequest(
                caller=caller,
                gallery_id=gallery.id,
                recipient_email="guest@example.com",
            )
        )

        client.succeed = False
        response = await resend.execute(
            ResendInviteRequest(caller=caller, invite_id=created.invite.id)
        )

        assert response.status == "failed"
        assert response.email_sent is False


class TestListInvites:
    @pytest.mark.asyncio
    async def test_lists_created_invites(self, unit_env):
        create = await unit_env.get(CreateInviteUseCase)
        list_invites = await unit_env.get(ListInvitesUseCase)
        caller, gallery = await seed(unit_env)
        for _ in range(3):
            await create.execute(
                CreateInviteRequest(caller=caller, gallery_id=gallery.id)
            )

        response = await list_invites.execute(
            ListInvitesRequest(caller=caller, gallery_id=gallery.id)
        )

        assert len(response.invites) == 3
        assert all(i.gallery_id == str(gallery.id) for i in response.invites)
        assert all(i.redeemable for i in response.invites)
