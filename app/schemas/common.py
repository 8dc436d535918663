"""
Common/shared Pydantic schemas.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    All schemas should inherit from this. Schemas carrying passwords
    override str_strip_whitespace so that secrets are taken verbatim.
    """

    model_config = ConfigDict(
        from_attributes=True,  # Allow ORM mode (SQLAlchemy objects)
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Generic paginated response wrapper.

    Usage:
        PaginatedResponse[TenantRead](items=tenants, total=42, skip=0, limit=20)
    """

    items: list[T]
    total: int = Field(..., description="Total number of matching items")
    skip: int = Field(..., description="Number of items skipped")
    limit: int = Field(..., description="Maximum items per page")

    @property
    def has_next(self) -> bool:
        return self.skip + self.limit < self.total


class MessageResponse(BaseModel):
    """Simple message response."""
    message: str


class ErrorResponse(BaseModel):
    """Body of every domain error response (user-facing pt-BR message)."""

    detail: str
    details: dict[str, Any] | None = None
