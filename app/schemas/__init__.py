"""
Pydantic schemas package.
"""

from app.schemas.common import (
    BaseSchema,
    ErrorResponse,
    MessageResponse,
    PaginatedResponse,
)
from app.schemas.tenant import (
    CustomizationRead,
    StorefrontRead,
    TenantRead,
    TenantUpdate,
)
from app.schemas.user import SessionUser, SignUpRequest, UserRead

__all__ = [
    # Common
    "BaseSchema",
    "MessageResponse",
    "ErrorResponse",
    "PaginatedResponse",
    # Tenant
    "CustomizationRead",
    "StorefrontRead",
    "TenantRead",
    "TenantUpdate",
    # User
    "SessionUser",
    "SignUpRequest",
    "UserRead",
]
