"""
Result type for calls to the hosted backend.

Every remote call made by a multi-step workflow goes through `attempt()`,
which turns success into `Ok(value)` and any exception into `Err(...)`.
The caller decides what an `Err` means for its step: abort, skip, or log
and continue.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Generic, TypeVar, Union

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful remote call."""

    value: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Err:
    """Failed remote call."""

    operation: str
    message: str
    exception: Exception | None = None
    ok: bool = field(default=False, init=False)


Result = Union[Ok[T], Err]


async def attempt(operation: str, call: Awaitable[T], **log_context: Any) -> "Result[T]":
    """
    Await a remote call and capture its outcome.

    Args:
        operation: Name used in logs and in the resulting Err
        call: Awaitable to run (a coroutine from a client or session)
        **log_context: Extra structured fields for the failure log

    Returns:
        Ok with the call's value, or Err with the failure message
    """
    try:
        value = await call
    except Exception as exc:
        message = getattr(exc, "message", None) or str(exc) or type(exc).__name__
        logger.warning(
            "remote_call_failed",
            operation=operation,
            error=message,
            error_type=type(exc).__name__,
            **log_context,
        )
        return Err(operation=operation, message=message, exception=exc)

    return Ok(value)
