"""
Integration tests for contract reads, extensions and the status refresh.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from app.config import settings
from app.core.database import db_manager
from app.features.contracts.service import ContractService
from app.features.contracts.tasks import _refresh_contract_statuses_async
from app.features.tenants.demo import DEMO_TENANTS
from app.features.tenants.provenance import DemoTenant, RealTenant, resolve_tenant_ref
from app.models import Tenant
from tests.factories import TenantFactory

DEMO = DEMO_TENANTS[0]


@pytest.mark.integration
class TestGetContractInfo:

    async def test_real_tenant(self, db_session):
        tenant = await TenantFactory.create(db_session, name="Loja X", started_days_ago=10)

        info = await ContractService.get_contract_info(db_session, RealTenant(tenant.id))

        assert info.tenant_id == tenant.id
        assert info.tenant_name == "Loja X"
        assert info.days_remaining == 20
        assert info.is_expired is False

    async def test_unknown_tenant_has_no_contract(self, db_session):
        assert await ContractService.get_contract_info(db_session, RealTenant("missing")) is None

    async def test_demo_tenant_resolves_without_database(self, db_session):
        now = datetime(2024, 3, 1, tzinfo=timezone.utc)

        info = await ContractService.get_contract_info(db_session, DemoTenant(DEMO), now)

        assert info.tenant_id == DEMO.id
        assert info.contract_start_date == now - timedelta(days=15)
        assert info.days_remaining == 15

    def test_provenance_is_decided_by_registered_id(self):
        assert resolve_tenant_ref(DEMO.id) == DemoTenant(DEMO)
        assert resolve_tenant_ref("demo-1700000000000-abc") == RealTenant("demo-1700000000000-abc")


@pytest.mark.integration
class TestExtendContract:

    async def test_two_extensions_add_up(self, db_session):
        tenant = await TenantFactory.create(db_session, contract_duration_days=30)
        original_end = tenant.contract_end_date

        first = await ContractService.extend_contract(db_session, RealTenant(tenant.id), 15)
        second = await ContractService.extend_contract(db_session, RealTenant(tenant.id), 15)

        assert first.success is True
        assert second.message == "Contrato estendido por 15 dias"
        assert second.contract.contract_end_date - original_end == timedelta(days=30)
        assert second.contract.contract_duration_days == 60

    async def test_expired_contract_becomes_active_again(self, db_session):
        tenant = await TenantFactory.create(
            db_session, started_days_ago=40, contract_duration_days=30, contract_status="expired"
        )

        result = await ContractService.extend_contract(db_session, RealTenant(tenant.id), 30)

        assert result.success is True
        assert result.contract.is_expired is False
        assert result.contract.contract_status == "active"

        stored = (await db_session.execute(select(Tenant).where(Tenant.id == tenant.id))).scalar_one()
        assert stored.contract_status == "active"

    async def test_extension_too_short_to_revive_keeps_expired(self, db_session):
        tenant = await TenantFactory.create(
            db_session, started_days_ago=40, contract_duration_days=30, contract_status="expired"
        )

        result = await ContractService.extend_contract(db_session, RealTenant(tenant.id), 5)

        assert result.success is True
        assert result.contract.is_expired is True
        assert result.contract.contract_status == "expired"

    @pytest.mark.parametrize("days", [0, -3])
    async def test_rejects_non_positive_days(self, db_session, days):
        tenant = await TenantFactory.create(db_session)

        result = await ContractService.extend_contract(db_session, RealTenant(tenant.id), days)

        assert result.success is False
        assert result.reason == "invalid_days"

    async def test_oversized_extension_writes_nothing(self, db_session):
        tenant = await TenantFactory.create(db_session, contract_duration_days=30)

        result = await ContractService.extend_contract(db_session, RealTenant(tenant.id), 3_000_000)

        assert result.success is False
        assert result.reason == "invalid_days"
        assert result.message == "Duração total do contrato não pode passar de 36500 dias"

        info = await ContractService.get_contract_info(db_session, RealTenant(tenant.id))
        assert info.contract_duration_days == 30

    async def test_total_duration_is_capped(self, db_session):
        tenant = await TenantFactory.create(db_session, contract_duration_days=36000)

        refused = await ContractService.extend_contract(db_session, RealTenant(tenant.id), 501)
        accepted = await ContractService.extend_contract(db_session, RealTenant(tenant.id), 500)

        assert refused.success is False
        assert refused.reason == "invalid_days"
        assert accepted.success is True
        assert accepted.contract.contract_duration_days == 36500

    async def test_demo_tenant_is_refused(self, db_session):
        result = await ContractService.extend_contract(db_session, DemoTenant(DEMO), 10)

        assert result.success is False
        assert result.reason == "demo_tenant"

    async def test_unknown_tenant(self, db_session):
        result = await ContractService.extend_contract(db_session, RealTenant("missing"), 10)

        assert result.success is False
        assert result.reason == "not_found"
        assert result.message == "Loja não encontrada"


@pytest.mark.integration
class TestUpdateContractStatus:

    async def test_marks_ended_contracts_expired(self, db_session):
        ended = await TenantFactory.create(db_session, started_days_ago=40, contract_duration_days=30)
        ended_trial = await TenantFactory.create(
            db_session, started_days_ago=20, contract_duration_days=14, contract_status="trial"
        )
        running = await TenantFactory.create(db_session, started_days_ago=5, contract_duration_days=30)
        suspended = await TenantFactory.create(
            db_session, started_days_ago=40, contract_duration_days=30, contract_status="suspended"
        )

        updated = await ContractService.update_contract_status(db_session)

        assert updated == 2
        result = await db_session.execute(select(Tenant.id, Tenant.contract_status))
        by_id = dict(result.all())
        assert by_id[ended.id] == "expired"
        assert by_id[ended_trial.id] == "expired"
        assert by_id[running.id] == "active"
        assert by_id[suspended.id] == "suspended"

    async def test_is_idempotent(self, db_session):
        await TenantFactory.create(db_session, started_days_ago=40, contract_duration_days=30)

        assert await ContractService.update_contract_status(db_session) == 1
        assert await ContractService.update_contract_status(db_session) == 0


@pytest.mark.integration
class TestRefreshTask:

    async def test_task_body_opens_and_closes_its_engine(self, db_session, tmp_path, monkeypatch):
        ended = await TenantFactory.create(db_session, started_days_ago=40, contract_duration_days=30)
        monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
        await db_session.commit()

        assert await _refresh_contract_statuses_async() == 1

        with pytest.raises(RuntimeError):
            db_manager.engine
        stored = await db_session.get(Tenant, ended.id, populate_existing=True)
        assert stored.contract_status == "expired"
