"""Authentication routes."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

from pavilion.application.usecase.auth import GetCurrentIdentityUseCase, LoginUseCase
from pavilion.application.usecase.auth.get_current_identity import (
    GetCurrentIdentityRequest,
    GetCurrentIdentityResponse,
)
from pavilion.application.usecase.auth.login import LoginRequest, LoginResponse
from pavilion.config import Settings
from pavilion.domain.error import UnauthenticatedError
from pavilion.domain.service import JWTService
from pavilion.interface.api.session import SessionCookie

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool
    message: str


class AuthStatusResponse(BaseModel):
    """Response for checking authentication status.

    Used by /auth/me to return the current identity if authenticated,
    or indicate unauthenticated state without raising an error.
    """

    authenticated: bool
    identity: GetCurrentIdentityResponse | None = None


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    response: Response,
    login_use_case: FromDishka[LoginUseCase],
    settings: FromDishka[Settings],
) -> LoginResponse:
    """Sign in an owner or administrator with email and password.

    The token is returned in the body for API clients and set as an
    HTTP-only cookie for browsers.
    """
    login_response = await login_use_case.execute(request)
    SessionCookie.from_settings(settings).attach(response, login_response.token)
    logger.info(f"Owner session started for user {login_response.user_id}")
    return login_response


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    settings: FromDishka[Settings],
) -> LogoutResponse:
    """Logout by clearing the authentication cookie."""
    SessionCookie.from_settings(settings).clear(response)
    return LogoutResponse(success=True, message="Successfully logged out")


@router.get("/me", response_model=AuthStatusResponse)
async def get_current_identity(
    request: Request,
    get_current_identity_use_case: FromDishka[GetCurrentIdentityUseCase],
    jwt_service: FromDishka[JWTService],
) -> AuthStatusResponse:
    """Get the current identity if authenticated, or report unauthenticated.

    Safe to call without a credential: it answers authenticated=false
    instead of raising, so the frontend can probe the session.

    Examples:
        Authenticated:
        {
            "authenticated": true,
            "identity": {
                "user_id": "...",
                "role": "guest",
                "capabilities": {"can_view": true, ...},
                ...
            }
        }

        Unauthenticated:
        {
            "authenticated": false,
            "identity": null
        }
    """
    token = jwt_service.extract_from_request(request)
    if token is None:
        return AuthStatusResponse(authenticated=False)

    try:
        identity = await get_current_identity_use_case.execute(
            GetCurrentIdentityRequest(token=token)
        )
    except UnauthenticatedError:
        # Invalid or expired token - expected, not an error
        return AuthStatusResponse(authenticated=False)
    return AuthStatusResponse(authenticated=True, identity=identity)
