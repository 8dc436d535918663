"""
Public storefront lookup.

Only active stores are visible. Demo stores resolve from their seed
without touching the database.
"""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import cached
from app.features.tenants.demo import demo_tenant_by_slug
from app.features.tenants.service import STOREFRONT_CACHE_NAMESPACE
from app.models.tenant import Tenant, TenantStatus
from app.schemas.tenant import CustomizationRead, StorefrontRead

logger = logging.getLogger(__name__)


class StorefrontService:

    @staticmethod
    @cached(
        namespace=STOREFRONT_CACHE_NAMESPACE,
        ttl=60,
        key_builder=lambda db, slug: slug.strip().lower(),
    )
    async def load(db: AsyncSession, slug: str) -> dict[str, Any] | None:
        """Public fields of an active store, or None."""
        normalized = slug.strip().lower()

        seed = demo_tenant_by_slug(normalized)
        if seed is not None:
            return StorefrontRead(
                id=seed.id,
                name=seed.name,
                slug=seed.slug,
                description=seed.description,
                settings=seed.settings,
                customization=CustomizationRead(**seed.customization),
                is_demo=True,
            ).model_dump(mode="json")

        result = await db.execute(
            select(Tenant).where(
                func.lower(Tenant.slug) == normalized,
                Tenant.status == TenantStatus.ACTIVE.value,
            )
        )
        tenant = result.scalars().first()
        if tenant is None:
            return None

        return StorefrontRead(
            id=tenant.id,
            name=tenant.name,
            slug=tenant.slug,
            description=tenant.description,
            logo_url=tenant.logo_url,
            settings=tenant.settings or {},
            customization=(
                CustomizationRead.model_validate(tenant.customization)
                if tenant.customization
                else None
            ),
        ).model_dump(mode="json")
