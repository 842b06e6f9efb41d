"""Session boundary: the credential cookie and the canonical host.

The cookie is scoped to the canonical host (or the configured cookie
domain). Requests that arrive on another spelling of the same site are
redirected before any route runs, so a credential is never evaluated
against the wrong host.
"""

from typing import Literal
from urllib.parse import urlunsplit

import logfire
from starlette.datastructures import Headers
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp, Receive, Scope, Send

from pavilion.config import SessionSettings, Settings


class SessionCookie:
    """Sets and clears the credential cookie with one set of attributes."""

    def __init__(self, settings: SessionSettings, production: bool, max_age: int):
        """Initialize the cookie policy.

        Args:
            settings: Cookie name and domain
            production: Production cookies are secure and cross-site
            max_age: Cookie lifetime in seconds, equal to the token lifetime
        """
        self.name = settings.cookie_name
        self.domain = settings.cookie_domain
        self.secure = production
        # Production needs cross-site delivery for the external redirect flow
        self.samesite: Literal["lax", "none"] = "none" if production else "lax"
        self.max_age = max_age

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionCookie":
        """Build the cookie policy for the running environment."""
        return cls(
            settings.session,
            production=settings.is_production,
            max_age=settings.auth.token_lifetime_seconds,
        )

    def attach(self, response: Response, token: str) -> None:
        """Set the credential cookie on a response."""
        response.set_cookie(
            key=self.name,
            value=token,
            max_age=self.max_age,
            path="/",
            domain=self.domain,
            secure=self.secure,
            httponly=True,
            samesite=self.samesite,
        )

    def clear(self, response: Response) -> None:
        """Expire the credential cookie.

        Uses the same path and domain as ``attach``; a browser ignores a
        deletion whose attributes differ from the cookie it holds.
        """
        response.delete_cookie(
            key=self.name,
            path="/",
            domain=self.domain,
            secure=self.secure,
            httponly=True,
            samesite=self.samesite,
        )


def _bare_host(host: str) -> str:
    """Lowercased host without a port."""
    host = host.strip().lower()
    if host.startswith("["):  # IPv6 literal
        return host
    return host.split(":", 1)[0]


def host_variants(settings: SessionSettings) -> set[str]:
    """Hostnames that redirect to the canonical host."""
    if not settings.canonical_host:
        return set()
    canonical = _bare_host(settings.canonical_host)
    if canonical.startswith("www."):
        counterpart = canonical[len("www.") :]
    else:
        counterpart = f"www.{canonical}"
    variants = {counterpart, *(_bare_host(alias) for alias in settings.host_aliases)}
    variants.discard(canonical)
    return variants


def canonicalize_host(
    host: str | None,
    path: str,
    query: str,
    settings: SessionSettings,
    scheme: str = "https",
) -> str | None:
    """Decide whether a request must move to the canonical host.

    Args:
        host: Host header of the request
        path: Request path
        query: Raw query string, without the leading "?"
        settings: Session settings naming the canonical host and aliases
        scheme: Scheme for the redirect target

    Returns:
        Redirect URL on the canonical host, or None to serve the request
    """
    if not host or not settings.canonical_host:
        return None
    if _bare_host(host) not in host_variants(settings):
        return None
    # The configured value keeps its port, e.g. "localhost:8000" in development
    netloc = settings.canonical_host.strip().lower()
    return urlunsplit((scheme, netloc, path or "/", query, ""))


class CanonicalHostMiddleware:
    """Redirects non-canonical hostnames before routing and authentication.

    A 308 keeps the method and body, so a POST to the apex domain is
    replayed on the canonical host.
    """

    def __init__(self, app: ASGIApp, settings: SessionSettings, https: bool) -> None:
        self.app = app
        self.settings = settings
        self.https = https

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        scheme = "https" if self.https else scope.get("scheme", "http")
        target = canonicalize_host(
            headers.get("host"),
            scope.get("path", "/"),
            scope.get("query_string", b"").decode("latin-1"),
            self.settings,
            scheme=scheme,
        )
        if target is None:
            await self.app(scope, receive, send)
            return

        logfire.info(
            "Redirecting to canonical host",
            host=headers.get("host"),
            target=target,
        )
        response = RedirectResponse(target, status_code=308)
        await response(scope, receive, send)
