"""
Pydantic schemas for Tenant.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from app.schemas.common import BaseSchema

TenantStatusLiteral = Literal["active", "inactive", "suspended", "trial"]
ContractStatusLiteral = Literal["active", "expired", "suspended", "trial"]


class TenantRead(BaseSchema):
    """Schema for reading tenant data (admin views)."""

    id: str
    name: str
    slug: str
    description: str | None = None
    logo_url: str | None = None
    domain: str | None = None
    status: str
    settings: dict[str, Any]
    owner_id: str | None = None
    contract_start_date: datetime
    contract_duration_days: int
    contract_end_date: datetime
    contract_status: str
    created_at: datetime
    updated_at: datetime


class TenantUpdate(BaseSchema):
    """Schema for updating a tenant (all fields optional)."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    logo_url: str | None = Field(None, max_length=500)
    domain: str | None = Field(None, max_length=255)
    status: TenantStatusLiteral | None = None
    settings: dict[str, Any] | None = None
    contract_status: ContractStatusLiteral | None = None


class CustomizationRead(BaseSchema):
    primary_color: str
    background_color: str
    text_color: str
    accent_color: str
    font_family: str
    font_size_base: int
    layout_style: str


class StorefrontRead(BaseSchema):
    """Public view of an active store."""

    id: str
    name: str
    slug: str
    description: str | None = None
    logo_url: str | None = None
    settings: dict[str, Any]
    customization: CustomizationRead | None = None
    is_demo: bool = False
