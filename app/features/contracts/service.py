"""
Contract business logic.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.metrics import contract_extensions_total, contracts_expired_total
from app.features.contracts.evaluator import (
    ContractInfo,
    as_utc,
    evaluate_contract,
    format_days_remaining,
    is_expiring_soon,
    status_color,
    status_label,
)
from app.features.contracts.schemas import ContractRead
from app.features.tenants.provenance import DemoTenant, RealTenant, TenantRef
from app.models.tenant import MAX_CONTRACT_DURATION_DAYS, ContractStatus, Tenant

logger = structlog.get_logger(__name__)

TOO_LONG_MESSAGE = f"Duração total do contrato não pode passar de {MAX_CONTRACT_DURATION_DAYS} dias"


@dataclass(frozen=True)
class ExtensionResult:
    success: bool
    message: str
    contract: ContractInfo | None = None
    reason: str | None = None  # invalid_days | demo_tenant | not_found


def to_contract_read(info: ContractInfo) -> ContractRead:
    return ContractRead(
        **info.as_dict(),
        status_label=status_label(info.contract_status),
        status_color=status_color(info.contract_status),
        days_remaining_text=format_days_remaining(
            info.days_since_expiry if info.is_expired else info.days_remaining,
            info.is_expired,
        ),
        is_expiring_soon=is_expiring_soon(info),
    )


class ContractService:
    """Contract reads, extensions and the periodic status refresh."""

    @staticmethod
    async def get_contract_info(
        db: AsyncSession,
        ref: TenantRef,
        now: datetime | None = None,
    ) -> ContractInfo | None:
        """
        Evaluate a tenant's contract.

        Returns None for an unknown tenant (no contract info is not an error).
        """
        now = now or datetime.now(timezone.utc)

        if isinstance(ref, DemoTenant):
            seed = ref.seed
            return evaluate_contract(
                seed.contract_start(now),
                seed.contract_duration_days,
                now,
                tenant_id=seed.id,
                tenant_name=seed.name,
            )

        tenant = await db.get(Tenant, ref.tenant_id, populate_existing=True)
        if tenant is None:
            return None

        return evaluate_contract(
            tenant.contract_start_date,
            tenant.contract_duration_days,
            now,
            tenant_id=tenant.id,
            tenant_name=tenant.name,
            stored_status=tenant.contract_status,
        )

    @staticmethod
    async def extend_contract(
        db: AsyncSession,
        ref: TenantRef,
        additional_days: int,
        now: datetime | None = None,
    ) -> ExtensionResult:
        """
        Add days to a tenant's contract duration.

        The end date moves by exactly `additional_days`; a stored "expired"
        status goes back to "active" once the new end is in the future.
        """
        if additional_days < 1:
            return ExtensionResult(False, "Número de dias deve ser pelo menos 1", reason="invalid_days")
        if additional_days > MAX_CONTRACT_DURATION_DAYS:
            return ExtensionResult(False, TOO_LONG_MESSAGE, reason="invalid_days")

        if isinstance(ref, DemoTenant):
            return ExtensionResult(
                False, "Contratos de lojas demo não podem ser estendidos", reason="demo_tenant"
            )

        tenant = await db.get(Tenant, ref.tenant_id, populate_existing=True)
        if tenant is None:
            return ExtensionResult(False, "Loja não encontrada", reason="not_found")
        if tenant.contract_duration_days + additional_days > MAX_CONTRACT_DURATION_DAYS:
            return ExtensionResult(False, TOO_LONG_MESSAGE, reason="invalid_days")

        now =now or datetime.now(timezone.utc)
        previous_end = tenant.contract_end_date

        tenant.contract_duration_days += additional_days
        if (
            tenant.contract_status == ContractStatus.EXPIRED.value
            and tenant.contract_end_date > as_utc(now)
        ):
            tenant.contract_status = ContractStatus.ACTIVE.value

        await db.commit()

        contract_extensions_total.inc()
        logger.info(
            "contract_extended",
            tenant_id=tenant.id,
            additional_days=additional_days,
            previous_end=previous_end.isoformat(),
            new_end=tenant.contract_end_date.isoformat(),
        )

        info = await ContractService.get_contract_info(db, RealTenant(tenant.id), now)
        return ExtensionResult(True, f"Contrato estendido por {additional_days} dias", info)

    @staticmethod
    async def update_contract_status(
        db: AsyncSession,
        now: datetime | None = None,
    ) -> int:
        """
        Mark every active/trial tenant whose contract has ended as expired.

        Returns:
            Number of tenants updated
        """
        now = now or datetime.now(timezone.utc)

        result = await db.execute(
            select(Tenant).where(
                Tenant.contract_status.in_(
                    [ContractStatus.ACTIVE.value, ContractStatus.TRIAL.value]
                )
            )
        )
        ended = [t.id for t in result.scalars() if t.contract_end_date < as_utc(now)]

        if ended:
            await db.execute(
                update(Tenant)
                .where(Tenant.id.in_(ended))
                .values(contract_status=ContractStatus.EXPIRED.value)
                .execution_options(synchronize_session="fetch")
            )
            await db.commit()
            contracts_expired_total.inc(len(ended))

        logger.info("contract_statuses_refreshed", expired=len(ended))
        return len(ended)
