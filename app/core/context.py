"""
Request context using contextvars.

Carries the request/trace IDs set by the middleware and the session
identity (user, tenant, auth source) set once the caller is authenticated.
"""

import contextvars
from typing import Any

request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
trace_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "trace_id", default=None
)
user_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "user_id", default=None
)
tenant_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "tenant_id", default=None
)
auth_source_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "auth_source", default=None
)

_ALL_VARS = {
    "request_id": request_id_var,
    "trace_id": trace_id_var,
    "user_id": user_id_var,
    "tenant_id": tenant_id_var,
    "auth_source": auth_source_var,
}


def set_request_context(**values: str | None) -> None:
    """
    Set request context variables.

    Unknown keys are ignored, None values leave the current value alone.
    """
    for key, value in values.items():
        var = _ALL_VARS.get(key)
        if var is not None and value:
            var.set(value)


def get_request_context() -> dict[str, Any]:
    """Get all request context as a dictionary."""
    return {key: var.get() for key, var in _ALL_VARS.items()}


def clear_request_context() -> None:
    """Clear all context variables."""
    for var in _ALL_VARS.values():
        var.set(None)
