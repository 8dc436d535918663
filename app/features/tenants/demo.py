"""
Built-in demo stores.

Demo stores ship with the service: they have fixed ids and slugs, resolve
without the database and carry a synthetic contract anchored to "now".
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from app.models.store_customization import DEFAULT_CUSTOMIZATION
from app.models.tenant import DEFAULT_TENANT_SETTINGS


@dataclass(frozen=True)
class DemoTenantSeed:
    id: str
    slug: str
    name: str
    description: str = ""
    status: str = "active"
    contract_duration_days: int = 30
    contract_started_days_ago: int = 15
    settings: dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_TENANT_SETTINGS))
    customization: dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_CUSTOMIZATION))

    def contract_start(self, now: datetime) -> datetime:
        return now - timedelta(days=self.contract_started_days_ago)


DEMO_TENANTS: tuple[DemoTenantSeed, ...] = (
    DemoTenantSeed(
        id="00000000-0000-4000-8000-000000000001",
        slug="loja-demo",
        name="Loja Demo",
        description="Loja de demonstração da plataforma",
    ),
)

_BY_ID = {seed.id: seed for seed in DEMO_TENANTS}
_BY_SLUG = {seed.slug: seed for seed in DEMO_TENANTS}


def demo_tenant_by_id(tenant_id: str) -> DemoTenantSeed | None:
    return _BY_ID.get(tenant_id)


def demo_tenant_by_slug(slug: str) -> DemoTenantSeed | None:
    return _BY_SLUG.get(slug.strip().lower())
