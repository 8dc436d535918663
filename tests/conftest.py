"""
Pytest configuration and shared fixtures.

Provides:
- Test database (SQLite file per test)
- Test client with the API wired to that database
- Local credential store backed by a temp JSON file
- Fake identity provider served through httpx.MockTransport
- Session tokens for an admin and a merchant
"""

import json
from typing import Any, AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.database import Base, get_db
from app.core.identity import IdentityProvider
from app.features.auth.service import AuthService
from app.features.credentials.seeds import SEED_CREDENTIALS
from app.features.credentials.storage import JsonFileStorage
from app.features.credentials.store import LocalCredentialStore
from app.main import create_application
from app.schemas.user import SessionUser

ADMIN_ID = "00000000-0000-4000-8000-00000000a001"


class FakeIdentityBackend:
    """
    In-memory stand-in for the hosted auth API.

    Serves /auth/v1/token, /auth/v1/signup and /auth/v1/admin/users and
    records every request it receives.
    """

    service_role_key = "service-key"

    def __init__(self) -> None:
        self.users: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.admin_create_fails = False
        self._next_id = 1

    def add_user(self, email: str, password: str, metadata: dict | None = None) -> dict[str, Any]:
        user = {
            "id": f"11111111-1111-4111-8111-{self._next_id:012d}",
            "email": email,
            "password": password,
            "user_metadata": metadata or {},
        }
        self._next_id += 1
        self.users[email] = user
        return user

    @staticmethod
    def _public(user: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in user.items() if k != "password"}

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content or b"{}")
        path = request.url.path

        if path == "/auth/v1/token":
            user = self.users.get(body.get("email"))
            if user is None or user["password"] != body.get("password"):
                return httpx.Response(
                    400,
                    json={"error": "invalid_grant", "error_description": "Invalid login credentials"},
                )
            return httpx.Response(
                200,
                json={
                    "access_token": "backend-access",
                    "refresh_token": "backend-refresh",
                    "user": self._public(user),
                },
            )

        if path == "/auth/v1/signup":
            if body["email"] in self.users:
                return httpx.Response(422, json={"msg": "User already registered"})
            user = self.add_user(body["email"], body["password"], body.get("data"))
            return httpx.Response(200, json=self._public(user))

        if path == "/auth/v1/admin/users":
            if request.headers.get("Authorization") != f"Bearer {self.service_role_key}":
                return httpx.Response(401, json={"msg": "Invalid API key"})
            if self.admin_create_fails:
                return httpx.Response(500, json={"message": "Database error creating new user"})
            if body["email"] in self.users:
                return httpx.Response(
                    422,
                    json={"msg": "A user with this email address has already been registered"},
                )
            user = self.add_user(body["email"], body["password"], body.get("user_metadata"))
            return httpx.Response(200, json=self._public(user))

        return httpx.Response(404, json={"error": "not_found"})


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def test_db_engine(tmp_path):
    """Fresh SQLite database for each test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session shared by the test body and the API under test."""
    session_factory = async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session


# ============================================================================
# Collaborators
# ============================================================================

@pytest.fixture
def credential_store(tmp_path) -> LocalCredentialStore:
    """Credential store over a temp JSON file, with the built-in seeds."""
    return LocalCredentialStore(
        JsonFileStorage(tmp_path / "local_storage.json"),
        seeds=SEED_CREDENTIALS,
    )


@pytest.fixture
def identity_backend() -> FakeIdentityBackend:
    return FakeIdentityBackend()


def build_provider(backend: FakeIdentityBackend, service_role_key: str | None) -> IdentityProvider:
    return IdentityProvider(
        base_url="https://backend.example.com",
        anon_key="anon-key",
        service_role_key=service_role_key,
        transport=httpx.MockTransport(backend.handler),
    )


@pytest.fixture
def identity_provider(identity_backend) -> IdentityProvider:
    """Provider with privileged access."""
    return build_provider(identity_backend, FakeIdentityBackend.service_role_key)


@pytest.fixture
def unprivileged_identity_provider(identity_backend) -> IdentityProvider:
    """Provider without a service-role key."""
    return build_provider(identity_backend, None)


# ============================================================================
# Application Fixtures
# ============================================================================

@pytest.fixture
def app(db_session, credential_store, identity_provider) -> FastAPI:
    """
    Application wired to the test database and fakes.

    ASGITransport does not run the lifespan, so app.state is set here.
    """
    application = create_application()

    async def override_get_db():
        yield db_session

    application.dependency_overrides[get_db] = override_get_db
    application.state.credential_store = credential_store
    application.state.identity_provider = identity_provider
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for API testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def bearer(session: SessionUser) -> dict[str, str]:
    token = AuthService.generate_tokens(session).access_token
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_session() -> SessionUser:
    return SessionUser(
        id=ADMIN_ID,
        email="admin@multiloja.com",
        name="Administrador",
        is_admin=True,
        auth_source="local",
    )


@pytest.fixture
def admin_headers(admin_session) -> dict[str, str]:
    return bearer(admin_session)


@pytest.fixture
def merchant_session_for():
    """Build a merchant session bound to a tenant."""

    def _build(tenant_id: str, tenant_slug: str = "loja", tenant_name: str = "Loja") -> SessionUser:
        return SessionUser(
            id="22222222-2222-4222-8222-000000000001",
            email="lojista@example.com",
            name="Lojista",
            tenant_id=tenant_id,
            tenant_slug=tenant_slug,
            tenant_name=tenant_name,
            auth_source="backend",
        )

    return _build


@pytest.fixture
def headers_for():
    """Authorization headers for an arbitrary session."""
    return bearer
