"""
Redis cache layer.

Provides:
- Namespaced get/set/delete with JSON serialization
- Raw (non-expiring) values for the Redis credential storage backend
- Counters for rate limiting
- `cached` decorator for read-mostly lookups (public storefronts)

Every read degrades to a miss when Redis is not initialized or fails.
"""

import json
import logging
from functools import wraps
from typing import Any, Callable

import redis.asyncio as aioredis

from app.config import settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "multiloja"


class CacheManager:
    """Redis-based cache manager (one client per process)."""

    def __init__(self) -> None:
        self._client: aioredis.Redis | None = None

    async def init(self) -> None:
        """Initialize Redis connection pool."""
        logger.info("Initializing Redis connection...")

        self._client = aioredis.from_url(
            str(settings.redis_url),
            encoding="utf-8",
            decode_responses=True,
            max_connections=20,
        )

        await self._client.ping()
        logger.info("Redis connection initialized")

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Redis connection closed")

    @property
    def is_ready(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> aioredis.Redis:
        """Get Redis client."""
        if not self._client:
            raise RuntimeError("Cache not initialized. Call init() first.")
        return self._client

    def _build_key(self, namespace: str, key: str) -> str:
        """
        Build namespaced cache key.

        Format: multiloja:{namespace}:{key}
        Example: multiloja:storefront:loja-x
        """
        return f"{KEY_PREFIX}:{namespace}:{key}"

    async def get(self, namespace: str, key: str) -> Any | None:
        """Get a deserialized value, or None on miss or error."""
        if not self.is_ready:
            return None

        cache_key = self._build_key(namespace, key)
        try:
            value = await self.client.get(cache_key)
            return None if value is None else json.loads(value)
        except Exception as e:
            logger.warning(f"Cache get error: {cache_key} - {e}")
            return None

    async def set(
        self,
        namespace: str,
        key: str,
        value: Any,
        ttl: int | None = None,
    ) -> bool:
        """Set a JSON-serializable value with TTL (default from settings)."""
        if not self.is_ready:
            return False

        cache_key = self._build_key(namespace, key)
        ttl = ttl or settings.redis_cache_ttl
        try:
            await self.client.set(cache_key, json.dumps(value, default=str), ex=ttl)
            return True
        except Exception as e:
            logger.warning(f"Cache set error: {cache_key} - {e}")
            return False

    async def delete(self, namespace: str, key: str) -> bool:
        """Delete specific cache entry."""
        if not self.is_ready:
            return False

        cache_key = self._build_key(namespace, key)
        try:
            return await self.client.delete(cache_key) > 0
        except Exception as e:
            logger.warning(f"Cache delete error: {cache_key} - {e}")
            return False

    async def get_raw(self, key: str) -> str | None:
        """
        Read a persistent string value.

        Unlike get(), errors propagate: callers use this as primary storage.
        """
        return await self.client.get(self._build_key("storage", key))

    async def set_raw(self, key: str, value: str) -> None:
        """Write a persistent string value (no TTL)."""
        await self.client.set(self._build_key("storage", key), value)

    async def increment(
        self,
        namespace: str,
        key: str,
        ttl: int | None = None,
    ) -> int:
        """
        Increment a counter, creating it if needed.

        Returns:
            New counter value
        """
        cache_key = self._build_key(namespace, key)

        try:
            pipe = self.client.pipeline()
            await pipe.incr(cache_key)
            if ttl:
                await pipe.expire(cache_key, ttl)
            results = await pipe.execute()
            return results[0]
        except Exception as e:
            logger.error(f"Cache increment error: {cache_key} - {e}")
            raise

    async def get_ttl(self, namespace: str, key: str) -> int:
        """Get remaining TTL for a key in seconds."""
        cache_key = self._build_key(namespace, key)
        try:
            return await self.client.ttl(cache_key)
        except Exception as e:
            logger.warning(f"Cache TTL error: {cache_key} - {e}")
            return -1


# Global instance
cache_manager = CacheManager()


def cached(
    namespace: str,
    ttl: int = 300,
    key_builder: Callable | None = None,
):
    """
    Decorator for caching async function results.

    Only JSON-compatible return values should be cached. None is never cached.

    Usage:
        @cached(namespace="storefront", ttl=60, key_builder=lambda slug: slug)
        async def load_storefront(slug: str) -> dict | None:
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            if key_builder:
                cache_key = key_builder(*args, **kwargs)
            else:
                key_parts = [func.__name__]
                key_parts.extend(str(a) for a in args)
                key_parts.extend(f"{k}={v}" for k, v in sorted(kwargs.items()))
                cache_key = ":".join(key_parts)

            cached_value = await cache_manager.get(namespace, cache_key)
            if cached_value is not None:
                logger.debug(f"Cache hit: {namespace}:{cache_key}")
                return cached_value

            result = await func(*args, **kwargs)
            if result is not None:
                await cache_manager.set(namespace, cache_key, result, ttl=ttl)
            return result

        return wrapper
    return decorator
