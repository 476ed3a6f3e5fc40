"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
- Access token: short-lived (60min), used for API calls and the WebSocket
- Refresh token: long-lived (30 days), used to get new access tokens

The "sub" claim carries the user id as a string (JWT requires it).
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from carepoint.config import settings


class TokenError(Exception):
    """Raised when token verification fails."""


def _encode(user_id: int, token_type: str, expires: datetime) -> str:
    payload = {
        "sub": str(user_id),
        "type": token_type,
        "exp": expires,
        "iat": datetime.now(timezone.utc),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: int, expires_minutes: Optional[int] = None) -> str:
    """Create a JWT access token."""
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.access_token_expire_minutes
    )
    return _encode(user_id, "access", expires)


def create_refresh_token(user_id: int, expires_days: Optional[int] = None) -> str:
    """Create a JWT refresh token."""
    expires = datetime.now(timezone.utc) + timedelta(
        days=expires_days or settings.refresh_token_expire_days
    )
    return _encode(user_id, "refresh", expires)


def verify_token(token: str, expected_type: Optional[str] = None) -> dict:
    """Verify and decode a JWT token.

    Returns the payload dict on success.
    Raises TokenError on failure.
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")

    if expected_type and payload.get("type") != expected_type:
        raise TokenError(f"Token type is not {expected_type!r}")
    return payload


def user_id_from_token(token: str, expected_type: str = "access") -> int:
    """Verify a token and return its subject as an int user id."""
    payload = verify_token(token, expected_type)
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise TokenError("Invalid token: bad subject")
