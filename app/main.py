"""
FastAPI application factory.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.cache import cache_manager
from app.core.database import db_manager
from app.core.error_tracking import error_tracker
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    IdentityProviderError,
    MultilojaException,
    PrivilegeUnavailableError,
    ProvisioningError,
    ResourceNotFoundError,
    SlugConflictError,
    ValidationError,
)
from app.core.identity import build_identity_provider
from app.core.logging_config import get_logger, setup_logging
from app.core.middleware import RequestContextMiddleware
from app.core.performance import track_http_metrics
from app.features.credentials.store import build_credential_store

setup_logging()
logger = get_logger(__name__)

# Most specific first
EXCEPTION_STATUS = (
    (SlugConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (ResourceNotFoundError, status.HTTP_404_NOT_FOUND),
    (PrivilegeUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (IdentityProviderError, status.HTTP_502_BAD_GATEWAY),
    (ProvisioningError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: MultilojaException) -> int:
    for exc_type, code in EXCEPTION_STATUS:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan events."""
    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    error_tracker.init()
    db_manager.init()

    try:
        await cache_manager.init()
    except Exception as e:
        if settings.credential_storage_backend == "redis":
            raise
        # Cache and rate limiting degrade to no-ops without Redis
        logger.warning("redis_unavailable", error=str(e))

    app.state.credential_store = build_credential_store()
    app.state.identity_provider = build_identity_provider(settings)

    logger.info(
        "application_ready",
        credential_storage=settings.credential_storage_backend,
        identity_provider=app.state.identity_provider is not None,
        privileged_user_creation=settings.can_create_backend_users,
    )

    yield

    logger.info("application_shutting_down")
    await db_manager.close()
    await cache_manager.close()
    logger.info("application_shutdown_complete")


def create_application() -> FastAPI:
    """Application factory."""

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Multi-tenant store platform: provisioning, contracts and local credentials",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # Middleware (order matters - last added = outermost)
    @app.middleware("http")
    async def performance_middleware(request: Request, call_next):
        return await track_http_metrics(request, call_next)

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        logger.warning(
            "validation_error",
            path=request.url.path,
            errors=exc.errors(),
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=jsonable_encoder({"detail": exc.errors()}),
        )

    @app.exception_handler(MultilojaException)
    async def application_exception_handler(
        request: Request,
        exc: MultilojaException,
    ) -> JSONResponse:
        """Domain errors carry user-facing messages; surface them verbatim."""
        status_code = status_for(exc)
        log = logger.error if status_code >= 500 else logger.warning
        log(
            "application_error",
            path=request.url.path,
            error=exc.message,
            error_type=type(exc).__name__,
            status_code=status_code,
        )

        if status_code >= 500:
            error_tracker.capture_exception(
                exc,
                context={"request": {"path": request.url.path, "method": request.method}},
            )

        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, **({"details": exc.details} if exc.details else {})},
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Global exception handler with error tracking."""
        request_id = getattr(request.state, "request_id", "unknown")

        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )

        error_tracker.capture_exception(
            exc,
            context={
                "request": {
                    "request_id": request_id,
                    "path": request.url.path,
                    "method": request.method,
                }
            },
        )

        detail = (
            "An internal error occurred. Please contact support."
            if settings.is_production
            else str(exc)
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": detail, "request_id": request_id},
        )

    from app.api.health_router import router as health_router
    from app.api.metrics_router import router as metrics_router
    from app.api.v1.router import v1_router

    app.include_router(health_router)

    if settings.metrics_enabled:
        app.include_router(metrics_router)

    app.include_router(v1_router, prefix="/api")

    @app.get("/", tags=["Root"])
    async def root() -> dict:
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "environment": settings.environment,
            "docs": "/docs" if settings.is_development else "Disabled in production",
            "health": "/health",
            "metrics": "/metrics" if settings.metrics_enabled else "Disabled",
        }

    logger.info("application_configured")
    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload and settings.is_development,
        log_level=settings.log_level.lower(),
        access_log=False,
    )
