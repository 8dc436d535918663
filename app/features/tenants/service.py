"""
Tenant administration business logic.
"""

import logging
from typing import Any

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import cache_manager
from app.models import StoreCustomization, Tenant, TenantUser
from app.schemas.tenant import TenantUpdate

logger = logging.getLogger(__name__)

STOREFRONT_CACHE_NAMESPACE = "storefront"


class TenantService:
    """Admin-side reads and writes on the tenants table."""

    @staticmethod
    async def list_tenants(
        db: AsyncSession,
        search: str | None = None,
        status: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Tenant], int]:
        """
        List tenants newest first.

        Args:
            search: Case-insensitive match on name or slug
            status: Exact status filter

        Returns:
            (page of tenants, total matching)
        """
        filters = []
        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            filters.append(
                or_(func.lower(Tenant.name).like(pattern), func.lower(Tenant.slug).like(pattern))
            )
        if status:
            filters.append(Tenant.status == status)

        total_result = await db.execute(
            select(func.count()).select_from(Tenant).where(*filters)
        )
        total = total_result.scalar_one()

        result = await db.execute(
            select(Tenant)
            .where(*filters)
            .order_by(Tenant.created_at.desc(), Tenant.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def get_tenant(db: AsyncSession, tenant_id: str) -> Tenant | None:
        return await db.get(Tenant, tenant_id, populate_existing=True)

    @staticmethod
    async def update_tenant(
        db: AsyncSession,
        tenant: Tenant,
        updates: TenantUpdate,
    ) -> Tenant:
        """Apply a partial update; only fields present in the request change."""
        changes: dict[str, Any] = updates.model_dump(exclude_unset=True)
        for field_name, value in changes.items():
            setattr(tenant, field_name, value)

        await db.commit()
        await db.refresh(tenant)
        await cache_manager.delete(STOREFRONT_CACHE_NAMESPACE, tenant.slug)

        logger.info(f"Tenant updated: {tenant.slug} fields={sorted(changes)}")
        return tenant

    @staticmethod
    async def delete_tenant(db: AsyncSession, tenant: Tenant) -> None:
        """Delete a tenant with its memberships and customization."""
        tenant_id, slug = tenant.id, tenant.slug

        await db.execute(delete(TenantUser).where(TenantUser.tenant_id == tenant_id))
        await db.execute(
            delete(StoreCustomization).where(StoreCustomization.tenant_id == tenant_id)
        )
        await db.execute(delete(Tenant).where(Tenant.id == tenant_id))
        await db.commit()
        await cache_manager.delete(STOREFRONT_CACHE_NAMESPACE, slug)

        logger.info(f"Tenant deleted: {slug} ({tenant_id})")
