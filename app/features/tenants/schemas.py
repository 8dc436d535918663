"""
Tenant administration and provisioning schemas.
"""

from typing import Any

from pydantic import ConfigDict, Field

from app.config import settings
from app.schemas.common import BaseSchema
from app.schemas.tenant import TenantStatusLiteral


class TenantProvisionRequest(BaseSchema):
    """
    Store creation form.

    Required fields default to empty so that the workflow's own validation
    produces the user-facing messages.
    """

    model_config = ConfigDict(str_strip_whitespace=False)

    name: str = Field("", max_length=255)
    slug: str = Field("", max_length=100)
    description: str | None = ""
    admin_email: str = Field("", max_length=255)
    admin_name: str = Field("", max_length=255)
    admin_password: str = Field("", max_length=128)
    contract_duration_days: int = Field(default_factory=lambda: settings.default_contract_duration_days)
    status: TenantStatusLiteral = "active"
    settings: dict[str, Any] | None = None


class StepRead(BaseSchema):
    name: str
    status: str
    detail: str | None = None


class ProvisionData(BaseSchema):
    tenant_id: str
    tenant_slug: str
    user_id: str
    real_user_created: bool
    registration_url: str
    store_url: str


class ProvisionResponse(BaseSchema):
    success: bool
    message: str
    data: ProvisionData
    steps: list[StepRead]


class SuggestionsResponse(BaseSchema):
    slug: str
    admin_email: str
    admin_name: str
