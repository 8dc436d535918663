"""
Contract lifecycle evaluation.

Pure date arithmetic over (start, duration, now). Nothing here touches the
database; results are recomputed on every read.
"""

import math
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from app.config import settings
from app.models.tenant import ContractStatus

SECONDS_PER_DAY = 86400

STATUS_COLORS = {
    ContractStatus.ACTIVE.value: "green",
    ContractStatus.TRIAL.value: "blue",
    ContractStatus.SUSPENDED.value: "yellow",
    ContractStatus.EXPIRED.value: "red",
}

STATUS_LABELS = {
    ContractStatus.ACTIVE.value: "Ativo",
    ContractStatus.TRIAL.value: "Trial",
    ContractStatus.SUSPENDED.value: "Suspenso",
    ContractStatus.EXPIRED.value: "Expirado",
}


@dataclass(frozen=True)
class ContractInfo:
    tenant_id: str
    tenant_name: str
    contract_start_date: datetime
    contract_end_date: datetime
    contract_duration_days: int
    contract_status: str
    days_remaining: int
    is_expired: bool
    days_since_expiry: int

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def evaluate_contract(
    start: datetime,
    duration_days: int,
    now: datetime | None = None,
    *,
    tenant_id: str,
    tenant_name: str,
    stored_status: str = ContractStatus.ACTIVE.value,
) -> ContractInfo:
    """
    Compute the contract view for a tenant at `now`.

    days_remaining rounds up and days_since_expiry rounds down, so a contract
    ending in 1 second still has 1 day left and one that ended 23 hours ago
    is expired for 0 days.
    """
    start = as_utc(start)
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    end = start + timedelta(days=duration_days)

    delta_seconds = (end - now).total_seconds()
    is_expired = delta_seconds < 0

    if is_expired:
        days_remaining = 0
        days_since_expiry = math.floor(-delta_seconds / SECONDS_PER_DAY)
        status = ContractStatus.EXPIRED.value
    else:
        days_remaining = math.ceil(delta_seconds / SECONDS_PER_DAY)
        days_since_expiry = 0
        # A stored "expired" is stale once the window reaches into the future again
        status = (
            ContractStatus.ACTIVE.value
            if stored_status == ContractStatus.EXPIRED.value
            else stored_status
        )

    return ContractInfo(
        tenant_id=tenant_id,
        tenant_name=tenant_name,
        contract_start_date=start,
        contract_end_date=end,
        contract_duration_days=duration_days,
        contract_status=status,
        days_remaining=days_remaining,
        is_expired=is_expired,
        days_since_expiry=days_since_expiry,
    )


def status_color(status: str) -> str:
    return STATUS_COLORS.get(status, "gray")


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, "Desconhecido")


def is_expiring_soon(info: ContractInfo, threshold_days: int | None = None) -> bool:
    if threshold_days is None:
        threshold_days = settings.expiring_soon_threshold_days
    return not info.is_expired and info.days_remaining <= threshold_days


def format_days_remaining(days: int, is_expired: bool) -> str:
    if is_expired:
        return f"Expirado há {days} dia{'' if days == 1 else 's'}"
    if days == 0:
        return "Expira hoje"
    if days == 1:
        return "Expira amanhã"
    return f"{days} dias restantes"
