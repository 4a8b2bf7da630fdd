"""
Tests for bearer token verification.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import jwt
import pytest

from course_platform.course_platform.course_service.access import AccessGuard, AuthenticatedIdentity
from course_platform.course_platform.course_service.auth import TokenCodec
from course_platform.course_platform.course_service.config import Settings
from course_platform.course_platform.course_service.errors import (
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
)


@pytest.fixture
def settings():
    return Settings(JWT_SECRET="unit-secret", DATABASE_URL="sqlite:///:memory:")


@pytest.fixture
def guard(settings):
    return AccessGuard(settings)


@pytest.fixture
def mock_request():
    request = Mock()
    request.state = Mock()
    return request


def test_valid_token_resolves_identity(settings, guard, mock_request):
    token = TokenCodec(settings).issue(7, "ann@x.com")

    identity = guard.authenticate(mock_request, f"Bearer {token}")

    assert identity == AuthenticatedIdentity(id=7, email="ann@x.com")
    assert mock_request.state.identity == identity


def test_token_accepted_just_before_expiry(settings, guard, mock_request):
    issued_at = datetime.now(timezone.utc) - timedelta(minutes=59)
    token = TokenCodec(settings).issue(7, "ann@x.com", issued_at=issued_at)

    assert guard.authenticate(mock_request, f"Bearer {token}").id == 7


def test_token_rejected_after_expiry(settings, guard, mock_request):
    issued_at = datetime.now(timezone.utc) - timedelta(hours=1, minutes=1)
    token = TokenCodec(settings).issue(7, "ann@x.com", issued_at=issued_at)

    with pytest.raises(ExpiredTokenError):
        guard.authenticate(mock_request, f"Bearer {token}")


@pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer ", "Token abc"])
def test_missing_bearer_token(guard, mock_request, header):
    with pytest.raises(MissingTokenError):
        guard.authenticate(mock_request, header)


def test_wrong_signature_rejected(guard, mock_request):
    now = datetime.now(timezone.utc)
    forged = jwt.encode(
        {"id": 7, "email": "ann@x.com", "iat": now, "exp": now + timedelta(hours=1)},
        "some-other-secret",
        algorithm="HS256"
    )
    with pytest.raises(InvalidTokenError):
        guard.authenticate(mock_request, f"Bearer {forged}")


def test_garbage_token_rejected(guard, mock_request):
    with pytest.raises(InvalidTokenError):
        guard.authenticate(mock_request, "Bearer not-a-jwt")


def test_token_without_identity_claims_rejected(guard, mock_request):
    now = datetime.now(timezone.utc)
    token = jwt.encode({"iat": now, "exp": now + timedelta(hours=1)}, "unit-secret", algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        guard.authenticate(mock_request, f"Bearer {token}")


def test_protected_route_without_token(client):
    response = client.get("/my-courses")
    assert response.status_code == 401
    assert response.json() == {"message": "No token provided"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_protected_route_with_expired_token(client):
    settings = client.app.state.settings
    token = TokenCodec(settings).issue(1, "ann@x.com", issued_at=datetime.now(timezone.utc) - timedelta(hours=2))

    response = client.get("/my-courses", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json() == {"message": "Token expired"}


def test_protected_route_with_forged_token(client):
    now = datetime.now(timezone.utc)
    forged = jwt.encode({"id": 1, "email": "a@x.com", "iat": now, "exp": now + timedelta(hours=1)},
                        "wrong", algorithm="HS256")
    response = client.get("/course/1/videos", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid token"}
