"""
Storefront customization (theme) for a tenant.
"""

from typing import Any

from sqlalchemy import JSON, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

DEFAULT_CUSTOMIZATION: dict[str, Any] = {
    "primary_color": "#3B82F6",
    "background_color": "#FFFFFF",
    "text_color": "#1F2937",
    "accent_color": "#EFF6FF",
    "font_family": "Inter",
    "font_size_base": 16,
    "layout_style": "modern",
}


class StoreCustomization(BaseModel):
    """Visual settings applied to a tenant's public storefront."""

    __tablename__ = "store_customizations"

    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )

    primary_color: Mapped[str] = mapped_column(String(20), default="#3B82F6", nullable=False)
    background_color: Mapped[str] = mapped_column(String(20), default="#FFFFFF", nullable=False)
    text_color: Mapped[str] = mapped_column(String(20), default="#1F2937", nullable=False)
    accent_color: Mapped[str] = mapped_column(String(20), default="#EFF6FF", nullable=False)
    font_family: Mapped[str] = mapped_column(String(100), default="Inter", nullable=False)
    font_size_base: Mapped[int] = mapped_column(Integer, default=16, nullable=False)
    layout_style: Mapped[str] = mapped_column(String(50), default="modern", nullable=False)

    extra: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
        comment="Free-form theme options (banner, footer, etc.)"
    )

    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="customization")
