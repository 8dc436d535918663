"""
Database models package.
"""

from app.core.database import Base
from app.models.admin_user import AdminUser
from app.models.base import BaseModel
from app.models.store_customization import DEFAULT_CUSTOMIZATION, StoreCustomization
from app.models.tenant import DEFAULT_TENANT_SETTINGS, ContractStatus, Tenant, TenantStatus
from app.models.tenant_user import TenantUser
from app.models.user import User

__all__ = [
    "Base",
    "BaseModel",
    "AdminUser",
    "ContractStatus",
    "DEFAULT_CUSTOMIZATION",
    "DEFAULT_TENANT_SETTINGS",
    "StoreCustomization",
    "Tenant",
    "TenantStatus",
    "TenantUser",
    "User",
]
