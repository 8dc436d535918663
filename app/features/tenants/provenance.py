"""
Tenant references with explicit provenance.

A reference is either a row in the tenants table (RealTenant) or one of
the built-in demo stores (DemoTenant). Callers branch on the variant, never
on what an identifier looks like.
"""

from dataclasses import dataclass
from typing import Union

from app.features.tenants.demo import DemoTenantSeed, demo_tenant_by_id


@dataclass(frozen=True)
class RealTenant:
    tenant_id: str


@dataclass(frozen=True)
class DemoTenant:
    seed: DemoTenantSeed

    @property
    def tenant_id(self) -> str:
        return self.seed.id

    @property
    def slug(self) -> str:
        return self.seed.slug


TenantRef = Union[RealTenant, DemoTenant]


def resolve_tenant_ref(tenant_id: str) -> TenantRef:
    """Demo stores are matched by their registered id; everything else is real."""
    seed = demo_tenant_by_id(tenant_id)
    if seed is not None:
        return DemoTenant(seed)
    return RealTenant(tenant_id)
