"""
API tests for authentication endpoints.
"""

import json

import pytest
from httpx import AsyncClient


@pytest.mark.api
class TestSignIn:
    """Test sign-in and session endpoints."""

    async def test_prefill_echoes_link_values(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/auth/signin", params={"email": "a@x.com", "password": "senha123"}
        )

        assert response.status_code == 200
        assert response.json() == {"email": "a@x.com", "password": "senha123"}

    async def test_seed_admin_signin(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/signin",
            json={"email": "admin@multiloja.com", "password": "admin123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["is_admin"] is True
        assert data["user"]["auth_source"] == "local"
        assert "password" not in data["user"]

    async def test_wrong_password(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/signin",
            json={"email": "admin@multiloja.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Credenciais inválidas"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_stored_entry_without_user_id(self, client: AsyncClient, credential_store):
        await credential_store.storage.write(
            credential_store.key,
            json.dumps({"x@x.com": {"password": "senha123", "user": {}}}),
        )

        response = await client.post(
            "/api/v1/auth/signin",
            json={"email": "x@x.com", "password": "senha123"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Credenciais inválidas"

    async def test_backend_signin(self, client: AsyncClient, identity_backend):
        identity_backend.add_user("maria@example.com", "senha123", {"name": "Maria"})

        response = await client.post(
            "/api/v1/auth/signin",
            json={"email": "maria@example.com", "password": "senha123"},
        )

        assert response.status_code == 200
        assert response.json()["user"]["auth_source"] == "backend"
        assert response.json()["user"]["name"] == "Maria"

    async def test_me_and_logout(self, client: AsyncClient):
        signin = await client.post(
            "/api/v1/auth/signin",
            json={"email": "loja@demo.com", "password": "demo123"},
        )
        headers = {"Authorization": f"Bearer {signin.json()['access_token']}"}

        me = await client.get("/api/v1/auth/me", headers=headers)
        assert me.status_code == 200
        assert me.json()["tenant_slug"] == "loja-demo"

        logout = await client.post("/api/v1/auth/logout", headers=headers)
        assert logout.status_code == 200

    async def test_me_requires_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401

    async def test_refresh_token_cannot_access(self, client: AsyncClient):
        signin = await client.post(
            "/api/v1/auth/signin",
            json={"email": "loja@demo.com", "password": "demo123"},
        )
        headers = {"Authorization": f"Bearer {signin.json()['refresh_token']}"}

        response = await client.get("/api/v1/auth/me", headers=headers)

        assert response.status_code == 401

    async def test_refresh(self, client: AsyncClient):
        signin = await client.post(
            "/api/v1/auth/signin",
            json={"email": "loja@demo.com", "password": "demo123"},
        )

        response = await client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": signin.json()["refresh_token"]},
        )

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "loja@demo.com"

    async def test_refresh_with_garbage(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/refresh", json={"refresh_token": "nope"})

        assert response.status_code == 401


@pytest.mark.api
class TestSignUp:

    async def test_signup_creates_account_and_store(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/signup",
            json={
                "email": "nova@example.com",
                "password": "senha123",
                "name": "Nova",
                "store_name": "Loja Nova",
                "store_slug": "loja-nova",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["tenant_slug"] == "loja-nova"
        assert data["message"] == "Conta criada com sucesso!"

        signin = await client.post(
            "/api/v1/auth/signin",
            json={"email": "nova@example.com", "password": "senha123"},
        )
        assert signin.json()["user"]["tenant_slug"] == "loja-nova"

    async def test_signup_short_password(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/signup",
            json={"email": "nova@example.com", "password": "123"},
        )

        assert response.status_code == 422

    async def test_signup_without_identity_provider(self, app, client: AsyncClient):
        app.state.identity_provider = None

        response = await client.post(
            "/api/v1/auth/signup",
            json={"email": "nova@example.com", "password": "senha123"},
        )

        assert response.status_code == 503
