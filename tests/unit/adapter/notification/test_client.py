"""Unit tests for invite notification clients."""

import json
from datetime import datetime, timezone

import httpx
import pytest

from pavilion.adapter.notification.client import (
    HttpNotificationClient,
    LoggingNotificationClient,
    render_subject,
    render_text,
)
from pavilion.domain.service.notification import InviteNotification
from pavilion.domain.value import CapabilityBundle


@pytest.fixture
def notification() -> InviteNotification:
    return InviteNotification(
        recipient_email="guest@example.com",
        gallery_title="Autumn Wedding",
        granter_name="Ada Lens",
        access_url="https://www.gallerypavilion.com/invite?code=abc123xyz789",
        capabilities=CapabilityBundle(can_download=True, can_request_purchase=False),
        expires_at=datetime(2026, 12, 24, tzinfo=timezone.utc),
    )


class TestRendering:
    def test_subject(self, notification):
        assert render_subject(notification) == (
            "Ada Lens invited you to view Autumn Wedding"
        )

    def test_text_lists_granted_capabilities_only(self, notification):
        text = render_text(notification)

        assert notification.access_url in text
        assert "Download photos" in text
        assert "View photos" in text
        assert "Request prints" not in text
        assert "December 24, 2026" in text


class TestHttpNotificationClient:
    @pytest.mark.asyncio
    async def test_posts_rendered_email(self, notification):
        # Arrange
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(202, json={"id": "msg_1"})

        client = HttpNotificationClient(
            webhook_url="https://mail.example.com/send",
            sender="Gallery Pavilion <no-reply@gallerypavilion.com>",
            api_key="mail-key",
            transport=httpx.MockTransport(handler),
        )

        # Act
        delivered = await client.send_invite(notification)

        # Assert
        assert delivered is True
        assert captured[0].headers["authorization"] == "Bearer mail-key"
        body = json.loads(captured[0].content)
        assert body["to"] == ["guest@example.com"]
        assert body["subject"] == render_subject(notification)

    @pytest.mark.asyncio
    async def test_rejection_returns_false(self, notification):
        client = HttpNotificationClient(
            webhook_url="https://mail.example.com/send",
            sender="no-reply@gallerypavilion.com",
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )

        assert await client.send_invite(notification) is False

    @pytest.mark.asyncio
    async def test_connection_error_returns_false(self, notification):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = HttpNotificationClient(
            webhook_url="https://mail.example.com/send",
            sender="no-reply@gallerypavilion.com",
            transport=httpx.MockTransport(handler),
        )

        assert await client.send_invite(notification) is False


class TestLoggingNotificationClient:
    @pytest.mark.asyncio
    async def test_always_succeeds(self, notification):
        assert await LoggingNotificationClient().send_invite(notification) is True
