"""
Error tracking and reporting via Sentry.

When disabled (no DSN, or SENTRY_ENABLED=false) events are only logged.
"""

from typing import Any

import sentry_sdk
import structlog
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from app.config import settings

logger = structlog.get_logger(__name__)


class ErrorTracker:
    """Thin wrapper around sentry_sdk with a log-only fallback mode."""

    def __init__(self, enabled: bool = False, dsn: str | None = None):
        self.enabled = bool(enabled and dsn)
        self.dsn = dsn

    def init(self) -> None:
        """Initialize the Sentry SDK (called once at startup)."""
        if not self.enabled:
            return

        sentry_sdk.init(
            dsn=self.dsn,
            environment=settings.environment,
            release=settings.app_version,
            traces_sample_rate=settings.sentry_traces_sample_rate,
            send_default_pii=False,
            integrations=[
                FastApiIntegration(),
                SqlalchemyIntegration(),
                AsyncioIntegration(),
            ],
        )
        logger.info("sentry_initialized", environment=settings.environment)

    def capture_exception(
        self,
        exception: Exception,
        context: dict[str, Any] | None = None,
    ) -> str | None:
        """
        Capture and report an exception.

        Returns:
            Event ID from Sentry (or None when disabled)
        """
        if not self.enabled:
            logger.error(
                "exception_captured",
                exception=str(exception),
                exception_type=type(exception).__name__,
                context=context,
                exc_info=exception,
            )
            return None

        try:
            with sentry_sdk.new_scope() as scope:
                for key, value in (context or {}).items():
                    scope.set_context(key, value)
                return sentry_sdk.capture_exception(exception)
        except Exception as e:
            logger.error(
                "error_tracking_failed",
                error=str(e),
                original_exception=str(exception),
            )
            return None

    def capture_message(
        self,
        message: str,
        level: str = "info",
        context: dict[str, Any] | None = None,
    ) -> str | None:
        """Capture a non-exception event (e.g. a partially failed provisioning)."""
        if not self.enabled:
            logger.info("message_captured", message=message, level=level, context=context)
            return None

        try:
            with sentry_sdk.new_scope() as scope:
                for key, value in (context or {}).items():
                    scope.set_context(key, value)
                return sentry_sdk.capture_message(message, level=level)
        except Exception as e:
            logger.error("error_tracking_failed", error=str(e))
            return None


error_tracker = ErrorTracker(
    enabled=settings.sentry_enabled,
    dsn=settings.sentry_dsn,
)
