"""
Tenant management endpoints.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import not_found
from app.core.rate_limit import rate_limit
from app.core.tenant import verify_tenant_access
from app.features.auth.dependencies import AdminSession, CurrentSession, Identity
from app.features.credentials.dependencies import Credentials
from app.features.tenants.provisioning import ProvisioningWorkflow
from app.features.tenants.schemas import (
    ProvisionResponse,
    SuggestionsResponse,
    TenantProvisionRequest,
)
from app.features.tenants.service import TenantService
from app.features.tenants.validators import suggest_fields
from app.models.tenant import Tenant
from app.schemas.common import ErrorResponse, PaginatedResponse
from app.schemas.tenant import TenantRead, TenantStatusLiteral, TenantUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["Tenants"])


@router.get("", response_model=PaginatedResponse[TenantRead])
async def list_tenants(
    session: AdminSession,
    db: Annotated[AsyncSession, Depends(get_db)],
    search: str | None = Query(None, max_length=255, description="Match on name or slug"),
    status_filter: TenantStatusLiteral | None = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[TenantRead]:
    """List all tenants, newest first (admin only)."""
    tenants, total = await TenantService.list_tenants(
        db, search=search, status=status_filter, skip=skip, limit=limit
    )
    return PaginatedResponse[TenantRead](
        items=[TenantRead.model_validate(t) for t in tenants],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.post(
    "",
    response_model=ProvisionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("provisioning", by="user"))],
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid field"},
        409: {"model": ErrorResponse, "description": "Slug already in use"},
    },
)
async def provision_tenant(
    form: TenantProvisionRequest,
    session: AdminSession,
    db: Annotated[AsyncSession, Depends(get_db)],
    identity: Identity,
    credentials: Credentials,
) -> ProvisionResponse:
    """
    Create a store and its admin login (admin only).

    Without privileged identity access the store is still created and the
    admin can sign in through the returned local credential ("modo demo").
    """
    workflow = ProvisioningWorkflow(db, identity, credentials)
    report = await workflow.run(form)

    logger.info(f"Tenant provisioned by {session.email}: {report.data['tenant_slug']}")
    return ProvisionResponse.model_validate(report.as_dict())


@router.get("/suggestions", response_model=SuggestionsResponse)
async def get_suggestions(
    session: AdminSession,
    name: str = Query(..., min_length=1, max_length=255),
) -> SuggestionsResponse:
    """Slug, admin email and admin name suggested from a store name."""
    suggestions = suggest_fields(name)
    return SuggestionsResponse(
        slug=suggestions.slug,
        admin_email=suggestions.admin_email,
        admin_name=suggestions.admin_name,
    )


@router.get("/{tenant_id}", response_model=TenantRead)
async def get_tenant(
    tenant_id: str,
    session: CurrentSession,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Tenant:
    """
    Get specific tenant by ID.

    - Admins: any tenant
    - Merchants: only their own tenant
    """
    verify_tenant_access(session, tenant_id)

    tenant = await TenantService.get_tenant(db, tenant_id)
    if tenant is None:
        raise not_found("Loja não encontrada")
    return tenant


@router.patch("/{tenant_id}", response_model=TenantRead)
async def update_tenant(
    tenant_id: str,
    updates: TenantUpdate,
    session: AdminSession,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Tenant:
    """Partially update a tenant (admin only)."""
    tenant = await TenantService.get_tenant(db, tenant_id)
    if tenant is None:
        raise not_found("Loja não encontrada")
    return await TenantService.update_tenant(db, tenant, updates)


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tenant(
    tenant_id: str,
    session: AdminSession,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    """Delete a tenant and its memberships (admin only)."""
    tenant = await TenantService.get_tenant(db, tenant_id)
    if tenant is None:
        raise not_found("Loja não encontrada")

    await TenantService.delete_tenant(db, tenant)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
