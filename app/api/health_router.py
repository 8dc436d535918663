"""
Health check endpoints for monitoring and orchestration.

Provides:
- Liveness probe: Is the app running?
- Readiness probe: Can the app serve traffic?
- Detailed health check: Status of all dependencies
"""

import time
from typing import Any

import structlog
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.config import settings
from app.core.cache import cache_manager
from app.core.database import db_manager

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Health"])


async def _check_database() -> dict[str, Any]:
    start = time.perf_counter()
    try:
        async for db in db_manager.get_session():
            await db.execute(text("SELECT 1"))
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
    return {
        "status": "healthy",
        "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
    }


async def _check_redis() -> dict[str, Any]:
    if not cache_manager.is_ready:
        return {"status": "disabled"}
    start = time.perf_counter()
    try:
        await cache_manager.client.ping()
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
    return {
        "status": "healthy",
        "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
    }


@router.get("/health/live")
async def liveness() -> dict:
    """
    Liveness probe.

    Returns:
        200: Application is running
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness() -> JSONResponse:
    """
    Readiness probe.

    Checks:
    - Database connectivity
    - Redis, when it backs the credential store

    Returns:
        200: Ready to serve traffic
        503: Not ready (dependencies unavailable)
    """
    checks = {"database": await _check_database()}
    is_ready = checks["database"]["status"] == "healthy"

    if settings.credential_storage_backend == "redis":
        checks["redis"] = await _check_redis()
        is_ready = is_ready and checks["redis"]["status"] == "healthy"

    return JSONResponse(
        status_code=status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if is_ready else "not_ready",
            "checks": checks,
        },
    )


@router.get("/health")
async def health(request: Request) -> dict:
    """
    Detailed health check with dependency status.

    The identity provider entry reports configuration only; it is not
    called, since sign-in keeps working through local credentials.
    """
    checks: dict[str, Any] = {
        "database": await _check_database(),
        "redis": await _check_redis(),
        "identity_provider": {
            "status": "configured"
            if getattr(request.app.state, "identity_provider", None)
            else "not_configured",
            "privileged_user_creation": settings.can_create_backend_users,
        },
        "credential_store": {"backend": settings.credential_storage_backend},
    }

    overall_status = "healthy"
    if checks["database"]["status"] != "healthy" or checks["redis"]["status"] == "unhealthy":
        overall_status = "degraded"

    return {
        "status": overall_status,
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": checks,
    }
