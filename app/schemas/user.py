"""
Pydantic schemas for users and sessions.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import ConfigDict, EmailStr, Field

from app.schemas.common import BaseSchema


class UserRead(BaseSchema):
    """Profile row."""

    id: str
    email: str
    name: str | None = None
    avatar_url: str | None = None
    created_at: datetime


class SessionUser(BaseSchema):
    """
    Signed-in user as carried in session tokens.

    Built either from a local credential profile or from the identity
    provider plus profile/admin/membership lookups.
    """

    id: str
    email: str
    name: str | None = None
    avatar_url: str | None = None
    is_admin: bool = False
    tenant_id: str | None = None
    tenant_slug: str | None = None
    tenant_name: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    auth_source: Literal["local", "backend"] = "backend"

    def to_claims(self) -> dict[str, Any]:
        claims = self.model_dump(exclude={"id"})
        claims["sub"] = self.id
        return claims

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "SessionUser":
        data = {k: v for k, v in claims.items() if k not in {"sub", "exp", "iat", "type"}}
        return cls(id=claims["sub"], **data)


class SignUpRequest(BaseSchema):
    """Public sign-up; store fields are optional and go together."""

    model_config = ConfigDict(str_strip_whitespace=False)

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: str | None = Field(None, max_length=255)
    store_name: str | None = Field(None, max_length=255)
    store_slug: str | None = Field(None, max_length=100)
