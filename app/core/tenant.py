"""
Tenant isolation utilities.

Platform admins may reach any tenant; a merchant session only its own.
"""

import logging

from app.core.exceptions import forbidden
from app.schemas.user import SessionUser

logger = logging.getLogger(__name__)


def can_access_tenant(session: SessionUser, tenant_id: str) -> bool:
    return session.is_admin or (session.tenant_id is not None and session.tenant_id == tenant_id)


def verify_tenant_access(session: SessionUser, tenant_id: str) -> None:
    """
    Raise 403 unless the session may read the given tenant.

    Usage:
        verify_tenant_access(session, tenant_id)
        info = await ContractService.get_contract_info(db, resolve_tenant_ref(tenant_id))
    """
    if not can_access_tenant(session, tenant_id):
        logger.warning(
            f"Tenant access denied: user={session.id} "
            f"own_tenant={session.tenant_id} requested={tenant_id}"
        )
        raise forbidden("Acesso negado a esta loja")
