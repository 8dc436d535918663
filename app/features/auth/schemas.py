"""
Authentication-specific schemas.
"""

from pydantic import ConfigDict, Field

from app.schemas.common import BaseSchema
from app.schemas.user import SessionUser


class SignInRequest(BaseSchema):
    """Sign-in request; the password is taken verbatim."""

    model_config = ConfigDict(str_strip_whitespace=False)

    email: str = Field(..., min_length=3, max_length=255, description="User email")
    password: str = Field(..., min_length=1, max_length=128, description="User password")


class SignInPrefill(BaseSchema):
    """Form defaults echoed from a pre-filled sign-in link."""

    email: str = ""
    password: str = ""


class TokenResponse(BaseSchema):
    """Token response schema."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration in seconds")
    user: SessionUser


class RefreshTokenRequest(BaseSchema):
    refresh_token: str = Field(..., description="Valid refresh token")


class SignUpResponse(BaseSchema):
    user_id: str
    email: str
    name: str | None = None
    tenant_id: str | None = None
    tenant_slug: str | None = None
    message: str
