"""
User profile model.

The identity provider owns credentials; this table only mirrors the
profile of each identity user (same id).
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel


class User(BaseModel):
    """Profile row for an identity-provider user."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address (unique)"
    )

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Display name"
    )

    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    memberships: Mapped[list["TenantUser"]] = relationship(
        "TenantUser",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
