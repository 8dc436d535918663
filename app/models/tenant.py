"""
Tenant model for multi-tenancy.

Each tenant is one store. The slug is its only public lookup key.
"""

import enum
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel


# contract_end_date must stay inside the datetime range
MAX_CONTRACT_DURATION_DAYS = 36500


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TenantStatus(str, enum.Enum):
    """Lifecycle status of a store."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    TRIAL = "trial"


class ContractStatus(str, enum.Enum):
    """Status of a store's paid-access window."""

    ACTIVE = "active"
    EXPIRED = "expired"
    SUSPENDED = "suspended"
    TRIAL = "trial"


DEFAULT_TENANT_SETTINGS: dict[str, Any] = {
    "theme": "default",
    "currency": "BRL",
    "colors": {
        "primary": "#3B82F6",
        "secondary": "#EFF6FF",
    },
}


class Tenant(BaseModel):
    """
    Tenant (store) model.

    Provides:
    - Data isolation between stores
    - Contract window (start date + duration in days)
    - Owner reference, empty when no real identity user was attached
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Store display name"
    )

    slug: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
        comment="URL-friendly identifier (e.g., 'loja-x')"
    )

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    domain: Mapped[str | None] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        default=TenantStatus.ACTIVE.value,
        nullable=False,
        comment="active | inactive | suspended | trial"
    )

    settings: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
        comment="Tenant-specific configuration"
    )

    owner_id: Mapped[str | None] = mapped_column(
        String(36),
        nullable=True,
        index=True,
        comment="Identity user owning the store (null for demo-mode stores)"
    )

    # Contract
    contract_start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    contract_duration_days: Mapped[int] = mapped_column(
        Integer,
        default=30,
        nullable=False,
    )

    contract_status: Mapped[str] = mapped_column(
        String(20),
        default=ContractStatus.ACTIVE.value,
        nullable=False,
        comment="active | expired | suspended | trial"
    )

    # Relationships
    members: Mapped[list["TenantUser"]] = relationship(
        "TenantUser",
        back_populates="tenant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    customization: Mapped["StoreCustomization"] = relationship(
        "StoreCustomization",
        back_populates="tenant",
        cascade="all, delete-orphan",
        passive_deletes=True,
        uselist=False,
        lazy="selectin",
    )

    @property
    def contract_end_date(self) -> datetime:
        """End of the contract window; always derived, never stored."""
        start = self.contract_start_date
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        return start + timedelta(days=self.contract_duration_days)

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, slug={self.slug})>"
