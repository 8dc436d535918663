"""
Contract request/response schemas.
"""

from datetime import datetime

from pydantic import Field

from app.schemas.common import BaseSchema


class ContractRead(BaseSchema):
    """Contract view with display helpers."""

    tenant_id: str
    tenant_name: str
    contract_start_date: datetime
    contract_end_date: datetime
    contract_duration_days: int
    contract_status: str
    days_remaining: int
    is_expired: bool
    days_since_expiry: int

    status_label: str = Field(..., description="pt-BR status text")
    status_color: str = Field(..., description="UI color key")
    days_remaining_text: str
    is_expiring_soon: bool


class ContractResponse(BaseSchema):
    """Contract lookup result; contract is null when the tenant is unknown."""

    contract: ContractRead | None


class ContractExtendRequest(BaseSchema):
    additional_days: int = Field(..., description="Days to add; the total duration is capped at 36500")


class ContractExtendResponse(BaseSchema):
    success: bool
    message: str
    contract: ContractRead | None = None


class ContractRefreshResponse(BaseSchema):
    updated: int = Field(..., description="Tenants marked as expired")
