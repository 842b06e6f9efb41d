"""Unit tests for JWTService."""

from uuid import uuid4

import pytest
from starlette.requests import Request

from pavilion.config import AuthSettings, SessionSettings
from pavilion.domain.model import CredentialClaims
from pavilion.domain.service import JWTService
from pavilion.domain.service.capability import full_access
from pavilion.domain.value import Role
from pavilion.util.jwt import TokenMalformedError


@pytest.fixture
def jwt_service() -> JWTService:
    return JWTService(
        AuthSettings(jwt_secret="unit-test-secret", jwt_expiry_days=7),
        SessionSettings(),
    )


@pytest.fixture
def owner_claims() -> CredentialClaims:
    return CredentialClaims(
        subject_id=str(uuid4()),
        email="owner@example.com",
        role=Role.OWNER,
        permissions=full_access(),
    )


def _request(headers: dict[str, str]) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": [
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in headers.items()
            ],
        }
    )


class TestIssueAndVerify:
    def test_round_trip(self, jwt_service, owner_claims):
        token = jwt_service.issue(owner_claims)

        payload = jwt_service.verify(token)

        assert payload.claims() == owner_claims

    def test_lifetime_matches_expiry_days(self, jwt_service):
        assert jwt_service.lifetime_seconds == 7 * 24 * 60 * 60

    def test_verify_raises_on_garbage(self, jwt_service):
        with pytest.raises(TokenMalformedError):
            jwt_service.verify("garbage")


class TestExtractFromRequest:
    def test_reads_cookie(self, jwt_service):
        request = _request({"cookie": "auth-token=from-cookie"})

        assert jwt_service.extract_from_request(request) == "from-cookie"

    def test_header_wins(self, jwt_service):
        request = _request(
            {"authorization": "Bearer from-header", "cookie": "auth-token=from-cookie"}
        )

        assert jwt_service.extract_from_request(request) == "from-header"

    def test_anonymous(self, jwt_service):
        assert jwt_service.extract_from_request(_request({})) is None
