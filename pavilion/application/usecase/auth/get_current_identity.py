"""Get current identity use case."""

from uuid import UUID

from pydantic import BaseModel

from pavilion.domain.error import NotFoundError, UnauthenticatedError
from pavilion.domain.service import IdentityService, JWTService
from pavilion.domain.value import CapabilityBundle, Role, UserId
from pavilion.util.jwt import TokenVerificationError


class GetCurrentIdentityRequest(BaseModel):
    """Get current identity request."""

    token: str | None  # JWT token, None when the request carried none


class GetCurrentIdentityResponse(BaseModel):
    """The signed-in identity and what the session may do."""

    user_id: str
    email: str
    role: Role
    display_name: str
    capabilities: CapabilityBundle
    gallery_id: str | None  # Set for guest sessions
    owner_profile_id: str | None
    guest_profile_id: str | None


class GetCurrentIdentityUseCase:
    """Use case for reading the credential attached to a request."""

    def __init__(
        self, jwt_service: JWTService, identity_service: IdentityService
    ) -> None:
        """Initialize get current identity use case.

        Args:
            jwt_service: JWT token domain service
            identity_service: Identity domain service
        """
        self.jwt_service = jwt_service
        self.identity_service = identity_service

    async def execute(
        self, request: GetCurrentIdentityRequest
    ) -> GetCurrentIdentityResponse:
        """Execute get current identity flow.

        Capabilities come from the token, not from the identity record: a
        guest keeps exactly what the redeemed invite granted.

        Args:
            request: Request with the JWT token

        Returns:
            Identity and capabilities

        Raises:
            UnauthenticatedError: If there is no valid token or the identity
                no longer exists
        """
        if not request.token:
            raise UnauthenticatedError("Not authenticated")

        try:
            payload = self.jwt_service.verify(request.token)
        except TokenVerificationError as e:
            raise UnauthenticatedError("Invalid or expired token") from e

        try:
            identity = await self.identity_service.get_by_id(
                UserId(UUID(payload.subject_id))
            )
        except (ValueError, NotFoundError) as e:
            raise UnauthenticatedError("Unknown identity") from e

        return GetCurrentIdentityResponse(
            user_id=str(identity.id),
            email=identity.email,
            role=payload.role,
            display_name=identity.display_name,
            capabilities=payload.permissions,
            gallery_id=str(payload.resource_id) if payload.resource_id else None,
            owner_profile_id=str(payload.owner_profile_id)
            if payload.owner_profile_id
            else None,
            guest_profile_id=str(payload.guest_profile_id)
            if payload.guest_profile_id
            else None,
        )
