"""Request authentication helpers shared by the routes."""

from fastapi import Request

from pavilion.domain.error import UnauthenticatedError
from pavilion.domain.model import CredentialPayload
from pavilion.domain.service import JWTService
from pavilion.util.jwt import TokenVerificationError


def require_credential(request: Request, jwt_service: JWTService) -> CredentialPayload:
    """Verify the credential carried by a request.

    Args:
        request: Incoming request
        jwt_service: JWT service

    Returns:
        The verified credential payload

    Raises:
        UnauthenticatedError: If the request has no credential or it is invalid
    """
    token = jwt_service.extract_from_request(request)
    if token is None:
        raise UnauthenticatedError("Not authenticated")
    try:
        return jwt_service.verify(token)
    except TokenVerificationError as e:
        raise UnauthenticatedError("Invalid or expired token") from e
