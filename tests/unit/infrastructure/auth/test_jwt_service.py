"""Tests for access token creation and validation."""

from datetime import timedelta

import jwt
import pytest

from device_registry.infrastructure.auth.jwt_service import (
    InvalidTokenError,
    JWTService,
    TokenExpiredError,
)

SECRET = "test-secret-key-with-enough-length-for-hs256"


@pytest.fixture
def service():
    return JWTService(secret_key=SECRET)


def test_round_trip_claims(service):
    token = service.create_access_token("alice", "acme", ["devices.write", "devices.read"])

    payload = service.validate_access_token(token)

    assert payload["sub"] == "alice"
    assert payload["namespace"] == "acme"
    assert payload["scope"] == "devices.read devices.write"
    assert payload["iss"] == "device-registry"


def test_scopes_from_claim():
    assert JWTService.scopes_from_claim("devices.read  devices.write") == frozenset(
        {"devices.read", "devices.write"}
    )
    assert JWTService.scopes_from_claim(None) == frozenset()


def test_expired_token(service):
    token = service.create_access_token("alice", "acme", [], expires_delta=timedelta(seconds=-1))

    with pytest.raises(TokenExpiredError):
        service.validate_access_token(token)


def test_wrong_secret(service):
    token = JWTService(secret_key="another-secret-key-of-sufficient-length").create_access_token(
        "alice", "acme", []
    )

    with pytest.raises(InvalidTokenError):
        service.validate_access_token(token)


def test_non_access_token(service):
    token = jwt.encode(
        {"iss": JWTService.ISSUER, "sub": "alice", "type": "refresh"},
        SECRET,
        algorithm=JWTService.ALGORITHM,
    )

    with pytest.raises(InvalidTokenError, match="Not an access token"):
        service.validate_access_token(token)
