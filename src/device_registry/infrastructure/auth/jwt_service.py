"""JWT token service.

Provides creation and validation of the bearer tokens callers present.
A token carries the caller's namespace and a space separated scope list.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

import jwt

from device_registry.core.config import get_settings


class JWTError(Exception):
    """Base exception for JWT-related errors."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTService:
    """Service for creating and validating access tokens."""

    ALGORITHM = "HS256"
    ISSUER = "device-registry"

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the JWT service.

        Args:
            secret_key: Secret key for signing tokens. If not provided,
                        uses the configured secret key from settings.
        """
        self._secret_key = secret_key

    @property
    def secret_key(self) -> str:
        """Get the secret key for signing tokens."""
        if self._secret_key:
            return self._secret_key
        return get_settings().secret_key

    def create_access_token(
        self,
        subject: str,
        namespace: str,
        scopes: Iterable[str],
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create an access token.

        Args:
            subject: Caller identity (user or device).
            namespace: Namespace the caller acts in.
            scopes: Granted scopes, e.g. ``devices.read``.
            expires_delta: Custom expiration time. Defaults to config value.

        Returns:
            Encoded JWT access token.
        """
        settings = get_settings()
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

        now = datetime.now(timezone.utc)
        expire = now + expires_delta

        payload = {
            "iss": self.ISSUER,
            "sub": subject,
            "iat": now,
            "exp": expire,
            "namespace": namespace,
            "scope": " ".join(sorted(set(scopes))),
            "type": "access",
        }

        return jwt.encode(payload, self.secret_key, algorithm=self.ALGORITHM)

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode and validate a JWT token.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.ALGORITHM],
                issuer=self.ISSUER,
            )
            return payload
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e

    def validate_access_token(self, token: str) -> dict[str, Any]:
        """Validate that a token is an access token and decode it.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or not an access token.
        """
        payload = self.decode_token(token)
        if payload.get("type") != "access":
            raise InvalidTokenError("Not an access token")
        return payload

    @staticmethod
    def scopes_from_claim(claim: str | None) -> frozenset[str]:
        """Split the ``scope`` claim into individual scopes."""
        if not claim:
            return frozenset()
        return frozenset(claim.split())


# Default JWT service instance
jwt_service = JWTService()
