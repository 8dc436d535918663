"""
Identity provider client.

Talks to the hosted backend's GoTrue-compatible auth REST API:
- password sign-in
- public sign-up
- privileged (service-role) user creation

Non-2xx responses raise IdentityProviderError. Creating users without a
service-role key raises PrivilegeUnavailableError before any request.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from app.core.exceptions import IdentityProviderError, PrivilegeUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class IdentityUser:
    """User as returned by the identity provider."""

    id: str
    email: str
    user_metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "IdentityUser":
        """Build from either a bare user object or a `{"user": {...}}` envelope."""
        data = payload.get("user") or payload
        if not data.get("id"):
            raise IdentityProviderError("Resposta do provedor de identidade sem usuário")
        return cls(
            id=str(data["id"]),
            email=data.get("email") or "",
            user_metadata=data.get("user_metadata") or {},
        )


@dataclass
class IdentitySession:
    """Successful password sign-in."""

    user: IdentityUser
    access_token: str | None = None
    refresh_token: str | None = None


class IdentityProvider:
    """
    Async client for the identity provider.

    Args:
        base_url: Backend URL (e.g. https://xyz.example.co)
        anon_key: Public API key, sent on every request
        service_role_key: Privileged key; required for admin_create_user
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        service_role_key: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._anon_key = anon_key
        self._service_role_key = service_role_key
        self._timeout = timeout
        self._transport = transport

    @property
    def can_create_users(self) -> bool:
        return bool(self._service_role_key)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={"apikey": self._anon_key},
        )

    async def _post(
        self,
        path: str,
        json: dict[str, Any],
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.post(path, json=json, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Identity provider unreachable: {e}")
            raise IdentityProviderError(
                "Provedor de identidade indisponível",
                details={"error": str(e)},
            ) from e

        if response.status_code >= 400:
            raise IdentityProviderError(
                _error_message(response),
                status_code=response.status_code,
                details={"path": path},
            )

        return response.json()

    async def sign_in_with_password(self, email: str, password: str) -> IdentitySession:
        """
        Verify a password with the identity provider.

        Raises:
            IdentityProviderError: Invalid credentials or provider failure
        """
        data = await self._post(
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return IdentitySession(
            user=IdentityUser.from_payload(data),
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
        )

    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any] | None = None,
    ) -> IdentityUser:
        """Public sign-up. The provider may answer with or without a session envelope."""
        data = await self._post(
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": metadata or {}},
        )
        return IdentityUser.from_payload(data)

    async def admin_create_user(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any] | None = None,
    ) -> IdentityUser:
        """
        Create an already-confirmed user with the service-role key.

        Raises:
            PrivilegeUnavailableError: No service-role key configured
            IdentityProviderError: Provider rejected the request
        """
        if not self._service_role_key:
            raise PrivilegeUnavailableError(
                "Chave de serviço não configurada; criação de usuário indisponível"
            )

        data = await self._post(
            "/auth/v1/admin/users",
            json={
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": metadata or {},
            },
            headers={
                "apikey": self._service_role_key,
                "Authorization": f"Bearer {self._service_role_key}",
            },
        )
        return IdentityUser.from_payload(data)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"

    for key in ("error_description", "msg", "message", "error"):
        value = body.get(key) if isinstance(body, dict) else None
        if value:
            return str(value)
    return f"HTTP {response.status_code}"


def build_identity_provider(settings: Any) -> IdentityProvider | None:
    """Create the provider from settings, or None when the backend is not configured."""
    if not settings.backend_url or not settings.backend_anon_key:
        logger.warning("Identity provider not configured; only local credentials will work")
        return None

    return IdentityProvider(
        base_url=settings.backend_url,
        anon_key=settings.backend_anon_key,
        service_role_key=settings.backend_service_role_key,
        timeout=settings.backend_timeout_seconds,
    )
