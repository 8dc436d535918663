"""
Credential admin schemas.
"""

from pydantic import ConfigDict, Field

from app.schemas.common import BaseSchema


class CredentialCreate(BaseSchema):
    """Manually registered local login."""

    model_config = ConfigDict(str_strip_whitespace=False)

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    name: str | None = Field(None, max_length=255)
    is_admin: bool = False
    tenant_id: str | None = None
    tenant_slug: str | None = None
    tenant_name: str | None = None


class CredentialRead(BaseSchema):
    email: str
    user_id: str | None = None
    name: str | None = None
    is_admin: bool = False
    tenant_id: str | None = None
    tenant_slug: str | None = None
    tenant_name: str | None = None
    signin_url: str


class CredentialList(BaseSchema):
    items: list[CredentialRead]
    total: int
    seed_emails: list[str] = Field(default_factory=list, description="Built-in logins (not listed)")


class CredentialClearResponse(BaseSchema):
    removed: int
