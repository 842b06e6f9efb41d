"""Password login use case."""

from datetime import datetime, timezone

import logfire
from pydantic import BaseModel

from pavilion.domain.error import UnauthenticatedError, ValidationError
from pavilion.domain.model import CredentialClaims
from pavilion.domain.service import IdentityService, JWTService
from pavilion.domain.service.capability import full_access
from pavilion.domain.value import CapabilityBundle, Role, normalize_email


class LoginRequest(BaseModel):
    """Owner or administrator sign-in."""

    email: str
    password: str
    role: Role | None = None  # Optional: reject if the account has another role


class LoginResponse(BaseModel):
    """Login response."""

    token: str
    expires_in: int  # Seconds, for the cookie max-age
    user_id: str
    email: str
    role: Role
    display_name: str
    capabilities: CapabilityBundle


class LoginUseCase:
    """Use case for owner and administrator password login."""

    def __init__(
        self, identity_service: IdentityService, jwt_service: JWTService
    ) -> None:
        """Initialize login use case.

        Args:
            identity_service: Identity domain service
            jwt_service: JWT token domain service
        """
        self.identity_service = identity_service
        self.jwt_service = jwt_service

    async def execute(self, request: LoginRequest) -> LoginResponse:
        """Execute login flow.

        Steps:
        1. Check the password against the stored hash
        2. Check the requested role, if any
        3. Mint a full-access credential

        Args:
            request: Email, password and optional role

        Returns:
            Signed token and the identity it belongs to

        Raises:
            ValidationError: If the email is malformed
            UnauthenticatedError: If the credentials are wrong
        """
        if request.role == Role.GUEST:
            raise ValidationError("Guests sign in with an invite code")

        try:
            email = normalize_email(request.email)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        with logfire.span("login.execute", email=email):
            identity = await self.identity_service.authenticate(email, request.password)

            if request.role is not None and identity.role != request.role:
                logfire.warn(
                    "Login role mismatch",
                    user_id=str(identity.id),
                    requested=request.role.value,
                    actual=identity.role.value,
                )
                raise UnauthenticatedError("Invalid email or password")

            capabilities = full_access()
            token = self.jwt_service.issue(
                CredentialClaims(
                    subject_id=str(identity.id),
                    email=identity.email,
                    role=identity.role,
                    owner_profile_id=identity.id if identity.role == Role.OWNER else None,
                    permissions=capabilities,
                ),
                now=datetime.now(timezone.utc),
            )

            return LoginResponse(
                token=token,
                expires_in=self.jwt_service.lifetime_seconds,
                user_id=str(identity.id),
                email=identity.email,
                role=identity.role,
                display_name=identity.display_name,
                capabilities=capabilities,
            )
