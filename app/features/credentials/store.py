"""
Local credential store.

Email/password pairs registered by this service only (provisioned stores,
manual entries, built-in seeds). They are never synchronized with the
identity provider. A matching local entry wins at sign-in.

The persisted map lives under one key of a StorageBackend:
    {"<email>": {"password": "...", "user": {...session profile...}}}
"""

import asyncio
import json
import logging
import random
import string
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from app.config import settings
from app.features.credentials.seeds import SEED_CREDENTIALS
from app.features.credentials.storage import StorageBackend, get_storage

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def local_user_id() -> str:
    """Id for a user that exists only in the local store: demo-<millis>-<9 chars>."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"demo-{int(time.time() * 1000)}-{suffix}"


@dataclass(frozen=True)
class CredentialEntry:
    email: str
    password: str
    profile: dict[str, Any] = field(default_factory=dict)
    is_seed: bool = False

    def to_storage(self) -> dict[str, Any]:
        return {"password": self.password, "user": self.profile}


class CredentialStore(ABC):
    """Interface injected into sign-in, provisioning and the admin routes."""

    @abstractmethod
    async def lookup(self, email: str) -> CredentialEntry | None:
        pass

    @abstractmethod
    async def upsert(self, email: str, password: str, profile: dict[str, Any]) -> CredentialEntry:
        pass

    @abstractmethod
    async def clear(self) -> int:
        """Remove every persisted entry; returns how many were removed."""
        pass

    @abstractmethod
    async def entries(self) -> dict[str, CredentialEntry]:
        """Persisted entries only (seeds excluded)."""
        pass


class LocalCredentialStore(CredentialStore):
    """
    Credential store over a local StorageBackend.

    Seeds are merged under persisted entries at read time and are never
    written, so clear() leaves them usable. A corrupt persisted map reads as
    empty; the next upsert rewrites a clean one.
    """

    def __init__(
        self,
        storage: StorageBackend,
        key: str = "demo_credentials",
        seeds: dict[str, dict] | None = None,
    ):
        self.storage = storage
        self.key = key
        self._seeds = {
            normalize_email(email): CredentialEntry(
                email=normalize_email(email),
                password=raw["password"],
                profile=dict(raw.get("user") or {}),
                is_seed=True,
            )
            for email, raw in (seeds or {}).items()
        }
        # Serializes read-modify-write cycles within the process
        self._lock = asyncio.Lock()

    async def _load_persisted(self) -> dict[str, CredentialEntry]:
        raw = await self.storage.read(self.key)
        if not raw:
            return {}

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Corrupt credential map under '{self.key}', ignoring it: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Credential map under '{self.key}' is not an object, ignoring it")
            return {}

        result: dict[str, CredentialEntry] = {}
        for email, value in data.items():
            if not isinstance(value, dict) or not isinstance(value.get("password"), str):
                logger.warning(f"Skipping malformed credential entry: {email}")
                continue
            profile = value.get("user")
            if not isinstance(profile, dict) or not isinstance(profile.get("id"), str):
                logger.warning(f"Skipping credential entry without a user id: {email}")
                continue
            key = normalize_email(email)
            result[key] = CredentialEntry(
                email=key,
                password=value["password"],
                profile=dict(profile),
            )
        return result

    async def _save(self, persisted: dict[str, CredentialEntry]) -> None:
        payload = {email: entry.to_storage() for email, entry in persisted.items()}
        await self.storage.write(self.key, json.dumps(payload, ensure_ascii=False))

    async def lookup(self, email: str) -> CredentialEntry | None:
        key = normalize_email(email)
        persisted = await self._load_persisted()
        return persisted.get(key) or self._seeds.get(key)

    async def upsert(self, email: str, password: str, profile: dict[str, Any]) -> CredentialEntry:
        key = normalize_email(email)
        entry = CredentialEntry(
            email=key,
            password=password,
            profile={**profile, "email": key},
        )

        async with self._lock:
            persisted = await self._load_persisted()
            persisted[key] = entry
            await self._save(persisted)

        logger.info(f"Credential registered: {key}")
        return entry

    async def clear(self) -> int:
        async with self._lock:
            persisted = await self._load_persisted()
            await self.storage.remove(self.key)

        logger.info(f"Credential store cleared: {len(persisted)} entries removed")
        return len(persisted)

    async def entries(self) -> dict[str, CredentialEntry]:
        return await self._load_persisted()

    @property
    def seed_emails(self) -> list[str]:
        return sorted(self._seeds)


def build_credential_store(storage: StorageBackend | None = None) -> LocalCredentialStore:
    """Store wired from settings (storage backend, key, seed toggle)."""
    return LocalCredentialStore(
        storage=storage or get_storage(),
        key=settings.credential_storage_key,
        seeds=SEED_CREDENTIALS if settings.seed_credentials_enabled else None,
    )
