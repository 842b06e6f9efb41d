"""Translation of domain errors into HTTP responses.

Invite lookups that fail for not-found, not-active or expired reasons share
one generic message so probing callers learn nothing about the invite.
A store outage is always a 503, never a 4xx.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pavilion.domain.error import (
    DomainError,
    InviteAlreadyRevokedError,
    InviteExpiredError,
    InviteNotActiveError,
    InviteNotFoundError,
    InviteUsageExceededError,
    NotFoundError,
    ServiceUnavailableError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationError,
)
from pavilion.util.jwt import TokenVerificationError

logger = logging.getLogger(__name__)

INVALID_INVITE_DETAIL = "Invite is invalid or has expired"


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str  # Stable machine-readable code
    detail: str


def _respond(status_code: int, error: str, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail).model_dump(),
    )


async def handle_unauthenticated(request: Request, exc: Exception) -> JSONResponse:
    return _respond(status.HTTP_401_UNAUTHORIZED, "unauthenticated", "Not authenticated")


async def handle_unauthorized(request: Request, exc: Exception) -> JSONResponse:
    return _respond(
        status.HTTP_403_FORBIDDEN,
        "unauthorized",
        "You do not have access to this resource",
    )


async def handle_not_found(request: Request, exc: Exception) -> JSONResponse:
    return _respond(status.HTTP_404_NOT_FOUND, "not_found", str(exc))


async def handle_invite_not_found(request: Request, exc: Exception) -> JSONResponse:
    return _respond(status.HTTP_404_NOT_FOUND, "invite_invalid", INVALID_INVITE_DETAIL)


async def handle_invite_inactive(request: Request, exc: Exception) -> JSONResponse:
    return _respond(status.HTTP_410_GONE, "invite_invalid", INVALID_INVITE_DETAIL)


async def handle_usage_exceeded(request: Request, exc: Exception) -> JSONResponse:
    return _respond(
        status.HTTP_410_GONE,
        "invite_usage_exceeded",
        "This invite has already been used the maximum number of times",
    )


async def handle_already_revoked(request: Request, exc: Exception) -> JSONResponse:
    return _respond(
        status.HTTP_409_CONFLICT, "invite_revoked", "Invite is no longer active"
    )


async def handle_validation(request: Request, exc: Exception) -> JSONResponse:
    return _respond(status.HTTP_400_BAD_REQUEST, "validation_error", str(exc))


async def handle_unavailable(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Store unavailable on {request.url.path}: {exc}")
    return _respond(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "service_unavailable",
        "Service temporarily unavailable, please try again",
    )


async def handle_domain_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled domain error on {request.url.path}: {exc!r}")
    return _respond(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "Internal error"
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain error handlers.

    Starlette picks the handler registered for the closest class in the
    exception's MRO, so the specific invite errors win over their bases.
    """
    app.add_exception_handler(UnauthenticatedError, handle_unauthenticated)
    app.add_exception_handler(TokenVerificationError, handle_unauthenticated)
    app.add_exception_handler(UnauthorizedError, handle_unauthorized)
    app.add_exception_handler(NotFoundError, handle_not_found)
    app.add_exception_handler(InviteNotFoundError, handle_invite_not_found)
    app.add_exception_handler(InviteNotActiveError, handle_invite_inactive)
    app.add_exception_handler(InviteExpiredError, handle_invite_inactive)
    app.add_exception_handler(InviteUsageExceededError, handle_usage_exceeded)
    app.add_exception_handler(InviteAlreadyRevokedError, handle_already_revoked)
    app.add_exception_handler(ValidationError, handle_validation)
    app.add_exception_handler(ServiceUnavailableError, handle_unavailable)
    app.add_exception_handler(DomainError, handle_domain_error)
