"""
Local key/value storage for the credential store.

Backends:
- JsonFileStorage: one JSON object on disk (default)
- RedisStorage: values in Redis under the cache namespace

Switch between backends via CREDENTIAL_STORAGE_BACKEND.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from app.config import settings
from app.core.cache import CacheManager, cache_manager

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """String values keyed by name, like a browser's localStorage."""

    @abstractmethod
    async def read(self, key: str) -> str | None:
        """Return the stored value or None if absent."""
        pass

    @abstractmethod
    async def write(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        pass


class JsonFileStorage(StorageBackend):
    """
    Stores all keys in a single JSON file.

    var/local_storage.json:
      {"demo_credentials": "{\"a@x.com\": {...}}"}
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or settings.credential_storage_path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Initialized local storage file: {self.path}")

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable storage file {self.path}, starting empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        tmp_path.replace(self.path)

    async def read(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    async def write(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    async def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)


class RedisStorage(StorageBackend):
    """Stores values in Redis (no TTL). Requires the cache manager to be initialized."""

    def __init__(self, cache: CacheManager | None = None):
        self.cache = cache or cache_manager

    async def read(self, key: str) -> str | None:
        return await self.cache.get_raw(key)

    async def write(self, key: str, value: str) -> None:
        await self.cache.set_raw(key, value)

    async def remove(self, key: str) -> None:
        await self.cache.delete("storage", key)


def get_storage() -> StorageBackend:
    """Storage backend selected by configuration."""
    if settings.credential_storage_backend == "redis":
        return RedisStorage()
    return JsonFileStorage()
