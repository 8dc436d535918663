"""
Authentication dependencies for dependency injection.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import forbidden, unauthorized
from app.core.identity import IdentityProvider
from app.core.security import decode_token
from app.schemas.user import SessionUser

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_session(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> SessionUser:
    """
    Resolve the signed-in user from a Bearer access token.

    Sessions are self-contained: local (demo) users have no database rows,
    so the token claims are the whole session.
    """
    if not credentials:
        raise unauthorized("Authentication required")

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise unauthorized("Invalid or expired token")

    if payload.get("type") != "access":
        raise unauthorized("Invalid token type. Use access token.")

    if not payload.get("sub"):
        raise unauthorized("Invalid token payload")

    try:
        session = SessionUser.from_claims(payload)
    except PydanticValidationError as e:
        logger.warning(f"Malformed session claims: {e}")
        raise unauthorized("Invalid token payload")

    request.state.user_id = session.id
    request.state.tenant_id = session.tenant_id
    request.state.auth_source = session.auth_source

    return session


async def get_admin_session(
    session: Annotated[SessionUser, Depends(get_current_session)],
) -> SessionUser:
    """Require a platform administrator."""
    if not session.is_admin:
        raise forbidden("Acesso restrito a administradores")
    return session


def get_identity_provider(request: Request) -> IdentityProvider | None:
    """Identity provider owned by the application (None when not configured)."""
    return getattr(request.app.state, "identity_provider", None)


CurrentSession = Annotated[SessionUser, Depends(get_current_session)]
AdminSession = Annotated[SessionUser, Depends(get_admin_session)]
Identity = Annotated[IdentityProvider | None, Depends(get_identity_provider)]
