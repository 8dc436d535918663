"""
Public storefront endpoints (no authentication).
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import not_found
from app.features.storefront.service import StorefrontService
from app.schemas.tenant import StorefrontRead

router = APIRouter(prefix="/stores", tags=["Storefront"])


@router.get("/{slug}", response_model=StorefrontRead)
async def get_storefront(
    slug: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StorefrontRead:
    """Resolve a public store by slug. Inactive or unknown stores are 404."""
    data = await StorefrontService.load(db, slug)
    if data is None:
        raise not_found("Loja não encontrada ou inativa")
    return StorefrontRead.model_validate(data)
