"""
Contract endpoints.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import bad_request, not_found
from app.core.tenant import verify_tenant_access
from app.features.auth.dependencies import AdminSession, CurrentSession
from app.features.contracts.schemas import (
    ContractExtendRequest,
    ContractExtendResponse,
    ContractRefreshResponse,
    ContractResponse,
)
from app.features.contracts.service import ContractService, to_contract_read
from app.features.tenants.provenance import resolve_tenant_ref

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Contracts"])


@router.get("/tenants/{tenant_id}/contract", response_model=ContractResponse)
async def get_contract(
    tenant_id: str,
    session: CurrentSession,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ContractResponse:
    """
    Contract info for a tenant.

    - Admins: any tenant
    - Merchants: only their own tenant

    An unknown tenant yields `contract: null`.
    """
    verify_tenant_access(session, tenant_id)

    info = await ContractService.get_contract_info(db, resolve_tenant_ref(tenant_id))
    return ContractResponse(contract=to_contract_read(info) if info else None)


@router.post("/tenants/{tenant_id}/contract/extend", response_model=ContractExtendResponse)
async def extend_contract(
    tenant_id: str,
    payload: ContractExtendRequest,
    session: AdminSession,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ContractExtendResponse:
    """Add days to a tenant's contract (admin only)."""
    result = await ContractService.extend_contract(
        db, resolve_tenant_ref(tenant_id), payload.additional_days
    )

    if not result.success:
        if result.reason == "not_found":
            raise not_found(result.message)
        raise bad_request(result.message)

    return ContractExtendResponse(
        success=True,
        message=result.message,
        contract=to_contract_read(result.contract) if result.contract else None,
    )


@router.post("/contracts/refresh-status", response_model=ContractRefreshResponse)
async def refresh_contract_statuses(
    session: AdminSession,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ContractRefreshResponse:
    """Mark ended contracts as expired (admin only; also runs daily)."""
    updated = await ContractService.update_contract_status(db)
    logger.info(f"Contract status refresh by {session.email}: {updated} expired")
    return ContractRefreshResponse(updated=updated)
