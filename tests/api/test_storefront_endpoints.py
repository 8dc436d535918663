"""
API tests for the public storefront.
"""

import pytest
from httpx import AsyncClient

from tests.factories import TenantFactory


@pytest.mark.api
class TestStorefront:

    async def test_active_store(self, client: AsyncClient, db_session):
        await TenantFactory.create(db_session, name="Loja X", slug="loja-x", with_customization=True)

        response = await client.get("/api/v1/stores/LOJA-X")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Loja X"
        assert data["is_demo"] is False
        assert data["customization"]["primary_color"] == "#3B82F6"
        assert data["customization"]["font_family"] == "Inter"

    async def test_store_without_customization(self, client: AsyncClient, db_session):
        await TenantFactory.create(db_session, slug="sem-tema")

        response = await client.get("/api/v1/stores/sem-tema")

        assert response.status_code == 200
        assert response.json()["customization"] is None

    async def test_inactive_store_is_hidden(self, client: AsyncClient, db_session):
        await TenantFactory.create(db_session, slug="fechada", status="inactive")

        response = await client.get("/api/v1/stores/fechada")

        assert response.status_code == 404
        assert response.json()["detail"] == "Loja não encontrada ou inativa"

    async def test_demo_store(self, client: AsyncClient):
        response = await client.get("/api/v1/stores/loja-demo")

        assert response.status_code == 200
        assert response.json()["is_demo"] is True
        assert response.json()["name"] == "Loja Demo"

    async def test_unknown_store(self, client: AsyncClient):
        response = await client.get("/api/v1/stores/nao-existe")

        assert response.status_code == 404
