"""
Platform administrator marker.

A user is a platform admin when a row with their id exists here.
"""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class AdminUser(BaseModel):
    __tablename__ = "admin_users"

    user_id: Mapped[str] = mapped_column(
        String(36),
        unique=True,
        nullable=False,
        index=True,
    )

    role: Mapped[str] = mapped_column(String(50), default="admin", nullable=False)
    is_super_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<AdminUser(user_id={self.user_id})>"
