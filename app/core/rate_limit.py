"""
Rate limiting using Redis counters (fixed window).

Fails open: when Redis is down or not configured, requests pass.
"""

import logging
from dataclasses import dataclass

from fastapi import HTTPException, Request, status

from app.config import settings
from app.core.cache import cache_manager

logger = logging.getLogger(__name__)


@dataclass
class RateLimitConfig:
    """Configuration for a rate limit rule."""

    requests: int     # Max requests
    window: int       # Time window in seconds
    key_prefix: str   # Key prefix for namespacing


RATE_LIMITS = {
    "default": RateLimitConfig(requests=60, window=60, key_prefix="rl"),
    "auth": RateLimitConfig(requests=10, window=60, key_prefix="rl_auth"),
    "provisioning": RateLimitConfig(requests=5, window=60, key_prefix="rl_provisioning"),
}


async def check_rate_limit(
    identifier: str,
    limit_type: str = "default",
) -> dict:
    """
    Check if identifier has exceeded rate limit.

    Args:
        identifier: Unique identifier (user id or client ip)
        limit_type: Rate limit tier to apply

    Returns:
        Dict with rate limit info

    Raises:
        HTTPException: 429 if rate limit exceeded
    """
    config = RATE_LIMITS.get(limit_type, RATE_LIMITS["default"])
    unlimited = {"limit": config.requests, "remaining": config.requests, "reset": 0}

    if not settings.rate_limit_enabled or not cache_manager.is_ready:
        return unlimited

    key = f"{identifier}:{limit_type}"

    try:
        current_count = await cache_manager.increment(
            namespace=config.key_prefix,
            key=key,
            ttl=config.window,
        )
        ttl = await cache_manager.get_ttl(config.key_prefix, key)
    except Exception as e:
        logger.error(f"Rate limit check error: {e}")
        return unlimited

    if current_count > config.requests:
        logger.warning(
            f"Rate limit exceeded: {identifier} ({limit_type}) "
            f"{current_count}/{config.requests}"
        )
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "Rate limit exceeded",
                "limit": config.requests,
                "window": config.window,
                "retry_after": ttl,
            },
            headers={
                "X-RateLimit-Limit": str(config.requests),
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": str(ttl),
                "Retry-After": str(ttl),
            },
        )

    return {
        "limit": config.requests,
        "remaining": max(0, config.requests - current_count),
        "reset": ttl,
        "current": current_count,
    }


def rate_limit(limit_type: str = "default", by: str = "ip"):
    """
    Rate limiting dependency factory.

    Args:
        limit_type: Rate limit tier (default, auth, provisioning)
        by: How to identify the requester (user, ip)

    Usage:
        @router.post("/signin", dependencies=[Depends(rate_limit("auth"))])
        async def signin(...):
            ...
    """
    async def dependency(request: Request) -> dict:
        client_host = request.client.host if request.client else "unknown"
        if by == "user":
            identifier = getattr(request.state, "user_id", None) or client_host
        else:
            identifier = client_host
        return await check_rate_limit(identifier, limit_type)

    return dependency
