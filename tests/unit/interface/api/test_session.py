"""Unit tests for the session cookie and host canonicalization."""

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from pavilion.config import SessionSettings, Settings
from pavilion.interface.api.session import (
    CanonicalHostMiddleware,
    SessionCookie,
    canonicalize_host,
    host_variants,
)

CANONICAL = SessionSettings(
    canonical_host="www.gallerypavilion.com",
    cookie_domain=".gallerypavilion.com",
    host_aliases=["gallerypavilion.app"],
)


def _set_cookie_header(production: bool, clear: bool = False) -> str:
    cookie = SessionCookie(CANONICAL, production=production, max_age=604800)
    response = JSONResponse({})
    if clear:
        cookie.clear(response)
    else:
        cookie.attach(response, "signed.jwt.value")
    return response.headers["set-cookie"]


class TestSessionCookie:
    """Cookie attributes per environment."""

    def test_development_cookie_is_lax_and_not_secure(self):
        header = _set_cookie_header(production=False)

        assert header.startswith("auth-token=signed.jwt.value")
        assert "HttpOnly" in header
        assert "SameSite=lax" in header
        assert "Secure" not in header
        assert "Max-Age=604800" in header
        assert "Path=/" in header
        assert "Domain=.gallerypavilion.com" in header

    def test_production_cookie_is_secure_cross_site(self):
        header = _set_cookie_header(production=True)

        assert "Secure" in header
        assert "SameSite=none" in header

    def test_clear_mirrors_attach_attributes(self):
        """A deletion only works with the same path and domain."""
        header = _set_cookie_header(production=True, clear=True)

        assert header.startswith('auth-token=""')
        assert "Max-Age=0" in header
        assert "Path=/" in header
        assert "Domain=.gallerypavilion.com" in header
        assert "Secure" in header
        assert "SameSite=none" in header

    def test_from_settings_uses_token_lifetime(self):
        settings = Settings(environment="development")

        cookie = SessionCookie.from_settings(settings)

        assert cookie.max_age == settings.auth.token_lifetime_seconds
        assert cookie.secure is False


class TestCanonicalizeHost:
    """Redirect decisions."""

    def test_variants_include_apex_and_aliases(self):
        assert host_variants(CANONICAL) == {"gallerypavilion.com", "gallerypavilion.app"}

    def test_apex_redirects_preserving_path_and_query(self):
        target = canonicalize_host(
            "gallerypavilion.com", "/invite", "code=abc123", CANONICAL
        )

        assert target == "https://www.gallerypavilion.com/invite?code=abc123"

    def test_port_and_case_are_ignored(self):
        target = canonicalize_host("GalleryPavilion.com:443", "/", "", CANONICAL)

        assert target == "https://www.gallerypavilion.com/"

    def test_configured_port_is_kept(self):
        settings = SessionSettings(
            canonical_host="localhost:8000", host_aliases=["127.0.0.1"]
        )

        target = canonicalize_host(
            "127.0.0.1:8000", "/auth/me", "", settings, scheme="http"
        )

        assert target == "http://localhost:8000/auth/me"

    @pytest.mark.parametrize(
        "host", ["www.gallerypavilion.com", "api.example.org", None, ""]
    )
    def test_other_hosts_are_served(self, host):
        assert canonicalize_host(host, "/health", "", CANONICAL) is None

    def test_disabled_without_canonical_host(self):
        assert canonicalize_host("anything.com", "/", "", SessionSettings()) is None


class TestCanonicalHostMiddleware:
    """The middleware redirects before any route runs."""

    @pytest.fixture
    def client(self):
        app = FastAPI()
        calls = []

        @app.post("/auth/login")
        async def login():
            calls.append("login")
            return {"ok": True}

        app.add_middleware(CanonicalHostMiddleware, settings=CANONICAL, https=True)
        client = TestClient(app)
        client.calls = calls
        return client

    def test_apex_post_gets_308(self, client):
        response = client.post(
            "/auth/login",
            headers={"host": "gallerypavilion.com"},
            follow_redirects=False,
        )

        assert response.status_code == 308
        assert response.headers["location"] == (
            "https://www.gallerypavilion.com/auth/login"
        )
        assert client.calls == []

    def test_canonical_host_is_served(self, client):
        response = client.post(
            "/auth/login", headers={"host": "www.gallerypavilion.com"}
        )

        assert response.status_code == 200
        assert client.calls == ["login"]
