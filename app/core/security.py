"""
Session token utilities.

Provides:
- JWT access/refresh token generation
- Token decoding and validation

Passwords are never hashed here: real accounts are verified by the
identity provider, local accounts by the credential store.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.config import settings

logger = logging.getLogger(__name__)


def _build_claims(
    subject: str | dict[str, Any],
    expires_delta: timedelta,
    token_type: str,
) -> dict[str, Any]:
    now = datetime.now(timezone.utc)

    if isinstance(subject, dict):
        to_encode = subject.copy()
    else:
        to_encode = {"sub": str(subject)}

    to_encode.update({
        "exp": now + expires_delta,
        "iat": now,
        "type": token_type,
    })
    return to_encode


def create_access_token(
    subject: str | dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        subject: User ID or custom claims dictionary
        expires_delta: Token expiration time (default: from settings)

    Returns:
        Encoded JWT token
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    return jwt.encode(
        _build_claims(subject, expires_delta, "access"),
        settings.secret_key,
        algorithm=settings.algorithm,
    )


def create_refresh_token(
    subject: str | dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT refresh token (default lifetime from settings)."""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.refresh_token_expire_days)

    return jwt.encode(
        _build_claims(subject, expires_delta, "refresh"),
        settings.secret_key,
        algorithm=settings.algorithm,
    )


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise
