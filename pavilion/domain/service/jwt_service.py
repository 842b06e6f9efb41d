"""JWT token domain service."""

from datetime import datetime

import logfire
from starlette.requests import HTTPConnection

from pavilion.config import AuthSettings, SessionSettings
from pavilion.domain.model.credential import CredentialClaims, CredentialPayload
from pavilion.util.jwt import (
    TokenVerificationError,
    create_token,
    extract_token,
    verify_token,
)

from .base import Service


class JWTService(Service):
    """Domain service for issuing, verifying and locating credentials.

    None of these operations touch storage.
    """

    def __init__(
        self, auth_settings: AuthSettings, session_settings: SessionSettings
    ) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
            session_settings: Cookie settings, for the credential cookie name
        """
        self.auth_settings = auth_settings
        self.session_settings = session_settings

    @property
    def lifetime_seconds(self) -> int:
        """Credential lifetime."""
        return self.auth_settings.token_lifetime_seconds

    def issue(self, claims: CredentialClaims, now: datetime | None = None) -> str:
        """Sign a credential.

        Args:
            claims: Identity and capability claims
            now: Issue time, defaults to the current time

        Returns:
            JWT token string

        Raises:
            TokenIssueError: If the claims are structurally invalid
        """
        with logfire.span(
            "jwt_service.issue", subject_id=claims.subject_id, role=claims.role.value
        ):
            token, expires_at = create_token(claims, self.auth_settings, now=now)
            logfire.info(
                "JWT token issued",
                subject_id=claims.subject_id,
                role=claims.role.value,
                expires_at=expires_at.isoformat(),
            )
            return token

    def verify(self, token: str, now: datetime | None = None) -> CredentialPayload:
        """Verify a token and return its claims.

        Args:
            token: JWT token string
            now: Evaluation time, defaults to the current time

        Returns:
            Credential payload

        Raises:
            TokenExpiredError: If the token has expired
            TokenSignatureError: If the signature was tampered with
            TokenMalformedError: If the token cannot be decoded
        """
        with logfire.span("jwt_service.verify"):
            try:
                payload = verify_token(token, self.auth_settings, now=now)
            except TokenVerificationError as e:
                logfire.warn(
                    "JWT token rejected", reason=type(e).__name__, error=str(e)
                )
                raise
            logfire.debug(
                "JWT token verified",
                subject_id=payload.subject_id,
                role=payload.role.value,
            )
            return payload

    def extract_from_request(self, request: HTTPConnection) -> str | None:
        """Locate the credential on a request.

        Checks the Authorization bearer header first, then the credential
        cookie. A request without either is anonymous, not invalid.

        Args:
            request: Incoming request

        Returns:
            Token string, or None if the request carries no credential
        """
        return extract_token(
            request.headers.get("authorization"),
            request.cookies.get(self.session_settings.cookie_name),
        )

