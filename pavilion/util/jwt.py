"""JWT token utilities."""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from pydantic import ValidationError as PydanticValidationError

from pavilion.config import AuthSettings
from pavilion.domain.model.credential import CredentialClaims, CredentialPayload
from pavilion.domain.value import Role


class JWTError(Exception):
    """JWT-related error."""

    pass


class TokenIssueError(JWTError):
    """Claims are incomplete and cannot be signed."""

    pass


class TokenVerificationError(JWTError):
    """A presented token was rejected."""

    pass


class TokenExpiredError(TokenVerificationError):
    """Signature is valid but exp has passed."""

    pass


class TokenSignatureError(TokenVerificationError):
    """Signature does not match the signing secret."""

    pass


class TokenMalformedError(TokenVerificationError):
    """Token cannot be decoded or its claims are incomplete."""

    pass


def _encode_claims(claims: CredentialClaims) -> dict[str, Any]:
    permissions = claims.permissions.model_dump()
    return {
        "sub": claims.subject_id,
        "email": claims.email,
        "role": claims.role.value,
        "owner_profile_id": str(claims.owner_profile_id)
        if claims.owner_profile_id
        else None,
        "guest_profile_id": str(claims.guest_profile_id)
        if claims.guest_profile_id
        else None,
        "resource_id": str(claims.resource_id) if claims.resource_id else None,
        "invite_code": claims.invite_code,
        "permissions": permissions,
    }


def create_token(
    claims: CredentialClaims,
    settings: AuthSettings,
    now: datetime | None = None,
) -> tuple[str, datetime]:
    """Create a signed JWT for the given claims.

    Args:
        claims: Identity and capability claims
        settings: Authentication settings
        now: Issue time, defaults to the current UTC time

    Returns:
        Tuple of (encoded token, expiry time)

    Raises:
        TokenIssueError: If the claims cannot form a usable credential
    """
    if not claims.subject_id:
        raise TokenIssueError("Credential subject is required")
    if claims.role == Role.GUEST and claims.resource_id is None:
        raise TokenIssueError("Guest credentials must be scoped to a gallery")

    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(days=settings.jwt_expiry_days)

    payload = _encode_claims(claims)
    payload.update(
        {
            "iat": issued_at,
            "exp": expires_at,
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
        }
    )

    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)

    return token, expires_at


def verify_token(
    token: str, settings: AuthSettings, now: datetime | None = None
) -> CredentialPayload:
    """Verify and decode a JWT token.

    Args:
        token: JWT token to verify
        settings: Authentication settings
        now: Evaluation time for the expiry check, defaults to the current time

    Returns:
        Credential payload if valid

    Raises:
        TokenExpiredError: If the token has expired
        TokenSignatureError: If the signature does not verify
        TokenMalformedError: If the token is unreadable or missing claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "iat", "sub"], "verify_exp": now is None},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError("Token has expired")
    except jwt.InvalidSignatureError:
        raise TokenSignatureError("Token signature is invalid")
    except jwt.InvalidTokenError:
        raise TokenMalformedError("Invalid token")

    issued_at = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
    expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    if now is not None and now >= expires_at:
        raise TokenExpiredError("Token has expired")

    try:
        return CredentialPayload(
            subject_id=payload["sub"],
            email=payload.get("email"),
            role=payload.get("role"),
            owner_profile_id=payload.get("owner_profile_id"),
            guest_profile_id=payload.get("guest_profile_id"),
            resource_id=payload.get("resource_id"),
            invite_code=payload.get("invite_code"),
            permissions=payload.get("permissions") or {},
            issued_at=issued_at,
            expires_at=expires_at,
        )
    except PydanticValidationError:
        raise TokenMalformedError("Token claims are incomplete")


def extract_token(
    authorization: str | None, cookie_value: str | None
) -> str | None:
    """Pick the credential from a request.

    The Authorization bearer header wins over the session cookie when both
    are present.

    Args:
        authorization: Raw Authorization header value
        cookie_value: Raw session cookie value

    Returns:
        The token string, or None if the request carries none
    """
    if authorization:
        scheme, _, value = authorization.partition(" ")
        if scheme.lower() == "bearer" and value.strip():
            return value.strip()
    if cookie_value:
        return cookie_value
    return None
