"""
Authentication endpoints.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import unavailable
from app.core.rate_limit import rate_limit
from app.features.auth.dependencies import CurrentSession, Identity
from app.features.auth.schemas import (
    RefreshTokenRequest,
    SignInPrefill,
    SignInRequest,
    SignUpResponse,
    TokenResponse,
)
from app.features.auth.service import auth_service
from app.features.credentials.dependencies import Credentials
from app.schemas.common import MessageResponse
from app.schemas.user import SessionUser, SignUpRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get("/signin", response_model=SignInPrefill)
async def signin_prefill(
    email: str = Query("", max_length=255),
    password: str = Query("", max_length=128),
) -> SignInPrefill:
    """
    Defaults for the sign-in form.

    Provisioning hands admins a link like /auth/signin?email=..&password=..;
    the values are echoed back untouched.
    """
    return SignInPrefill(email=email, password=password)


@router.post(
    "/signin",
    response_model=TokenResponse,
    dependencies=[Depends(rate_limit("auth"))],
)
async def signin(
    credentials: SignInRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    store: Credentials,
    identity: Identity,
) -> TokenResponse:
    """
    Sign in with email and password.

    Local credentials are checked first; otherwise the identity provider
    verifies the password.
    """
    session = await auth_service.sign_in(
        db,
        store,
        identity,
        email=credentials.email,
        password=credentials.password,
    )
    return auth_service.generate_tokens(session)


@router.post(
    "/signup",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("auth"))],
)
async def signup(
    payload: SignUpRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    identity: Identity,
) -> SignUpResponse:
    """
    Create an account at the identity provider.

    When store_name and store_slug are both given, a store owned by the
    new user is created as well.
    """
    if identity is None:
        raise unavailable("Cadastro indisponível: provedor de identidade não configurado")

    return await auth_service.sign_up(db, identity, payload)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    store: Credentials,
) -> TokenResponse:
    """Exchange a refresh token for a new token pair."""
    return await auth_service.refresh_access_token(store, refresh_data.refresh_token)


@router.get("/me", response_model=SessionUser)
async def get_current_user_info(session: CurrentSession) -> SessionUser:
    """Current session profile."""
    return session


@router.post("/logout", response_model=MessageResponse)
async def logout(session: CurrentSession) -> MessageResponse:
    """
    Logout endpoint.

    Sessions are stateless JWTs; the client discards its tokens.
    """
    logger.info(f"User logged out: {session.email} ({session.auth_source})")
    return MessageResponse(message="Successfully logged out")
