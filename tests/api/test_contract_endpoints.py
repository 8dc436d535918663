"""
API tests for contract endpoints.
"""

import pytest
from httpx import AsyncClient

from app.features.tenants.demo import DEMO_TENANTS
from tests.factories import TenantFactory

DEMO_ID = DEMO_TENANTS[0].id


@pytest.mark.api
class TestContractRead:

    async def test_merchant_reads_own_contract(
        self, client: AsyncClient, headers_for, merchant_session_for, db_session
    ):
        tenant = await TenantFactory.create(db_session, name="Loja X", started_days_ago=25)
        headers = headers_for(merchant_session_for(tenant.id))

        response = await client.get(f"/api/v1/tenants/{tenant.id}/contract", headers=headers)

        assert response.status_code == 200
        contract = response.json()["contract"]
        assert contract["tenant_name"] == "Loja X"
        assert contract["days_remaining"] == 5
        assert contract["status_label"] == "Ativo"
        assert contract["status_color"] == "green"
        assert contract["days_remaining_text"] == "5 dias restantes"
        assert contract["is_expiring_soon"] is True

    async def test_merchant_cannot_read_other_contract(
        self, client: AsyncClient, headers_for, merchant_session_for, db_session
    ):
        other = await TenantFactory.create(db_session)
        headers = headers_for(merchant_session_for("someone-else"))

        response = await client.get(f"/api/v1/tenants/{other.id}/contract", headers=headers)

        assert response.status_code == 403

    async def test_expired_contract(self, client: AsyncClient, admin_headers, db_session):
        tenant = await TenantFactory.create(db_session, started_days_ago=40, contract_duration_days=30)

        contract = (
            await client.get(f"/api/v1/tenants/{tenant.id}/contract", headers=admin_headers)
        ).json()["contract"]

        assert contract["is_expired"] is True
        assert contract["contract_status"] == "expired"
        assert contract["days_since_expiry"] == 10
        assert contract["days_remaining_text"] == "Expirado há 10 dias"

    async def test_unknown_tenant_has_null_contract(self, client: AsyncClient, admin_headers):
        response = await client.get("/api/v1/tenants/missing/contract", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"contract": None}

    async def test_demo_store_contract(self, client: AsyncClient, admin_headers):
        response = await client.get(f"/api/v1/tenants/{DEMO_ID}/contract", headers=admin_headers)

        assert response.json()["contract"]["tenant_name"] == "Loja Demo"
        assert response.json()["contract"]["days_remaining"] == 15


@pytest.mark.api
class TestContractExtension:

    async def test_extend(self, client: AsyncClient, admin_headers, db_session):
        tenant = await TenantFactory.create(db_session, contract_duration_days=30)

        response = await client.post(
            f"/api/v1/tenants/{tenant.id}/contract/extend",
            json={"additional_days": 15},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Contrato estendido por 15 dias"
        assert data["contract"]["contract_duration_days"] == 45

    async def test_invalid_days(self, client: AsyncClient, admin_headers, db_session):
        tenant = await TenantFactory.create(db_session)

        response = await client.post(
            f"/api/v1/tenants/{tenant.id}/contract/extend",
            json={"additional_days": 0},
            headers=admin_headers,
        )

        assert response.status_code == 400

    async def test_oversized_extension_keeps_tenant_readable(
        self, client: AsyncClient, admin_headers, db_session
    ):
        tenant = await TenantFactory.create(db_session, contract_duration_days=30)

        response = await client.post(
            f"/api/v1/tenants/{tenant.id}/contract/extend",
            json={"additional_days": 3_000_000},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Duração total do contrato não pode passar de 36500 dias"

        listing = await client.get("/api/v1/tenants", headers=admin_headers)
        assert listing.status_code == 200
        assert listing.json()["items"][0]["contract_duration_days"] == 30

        contract = await client.get(f"/api/v1/tenants/{tenant.id}/contract", headers=admin_headers)
        assert contract.status_code == 200

    async def test_demo_store_is_refused(self, client: AsyncClient, admin_headers):
        response = await client.post(
            f"/api/v1/tenants/{DEMO_ID}/contract/extend",
            json={"additional_days": 10},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Contratos de lojas demo não podem ser estendidos"

    async def test_unknown_tenant(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/v1/tenants/missing/contract/extend",
            json={"additional_days": 10},
            headers=admin_headers,
        )

        assert response.status_code == 404

    async def test_merchant_cannot_extend(
        self, client: AsyncClient, headers_for, merchant_session_for, db_session
    ):
        tenant = await TenantFactory.create(db_session)
        headers = headers_for(merchant_session_for(tenant.id))

        response = await client.post(
            f"/api/v1/tenants/{tenant.id}/contract/extend",
            json={"additional_days": 10},
            headers=headers,
        )

        assert response.status_code == 403


@pytest.mark.api
class TestContractRefresh:

    async def test_refresh_status(self, client: AsyncClient, admin_headers, db_session):
        await TenantFactory.create(db_session, started_days_ago=40, contract_duration_days=30)
        await TenantFactory.create(db_session)

        response = await client.post("/api/v1/contracts/refresh-status", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"updated": 1}
