"""
Custom exception hierarchy for the application.
"""

from typing import Any

from fastapi import HTTPException, status


class MultilojaException(Exception):
    """Base exception for all application exceptions."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(MultilojaException):
    """Raised when authentication fails."""
    pass


class AuthorizationError(MultilojaException):
    """Raised when a session lacks permissions."""
    pass


class TenantAccessError(MultilojaException):
    """Raised when a merchant tries to reach another tenant's data."""
    pass


class ResourceNotFoundError(MultilojaException):
    """Raised when a requested resource doesn't exist."""
    pass


class ValidationError(MultilojaException):
    """Raised when input validation fails."""
    pass


class SlugConflictError(ValidationError):
    """Raised when a store slug is already taken."""
    pass


class ProvisioningError(MultilojaException):
    """Raised when a provisioning step that cannot be skipped fails."""
    pass


class IdentityProviderError(MultilojaException):
    """Raised when the hosted identity provider rejects or fails a call."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.status_code = status_code
        super().__init__(message, details)


class PrivilegeUnavailableError(IdentityProviderError):
    """Raised when a privileged call is attempted without a service-role key."""
    pass


# HTTP Exception helpers
def unauthorized(detail: str = "Not authenticated") -> HTTPException:
    """Return 401 Unauthorized exception."""
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def forbidden(detail: str = "Insufficient permissions") -> HTTPException:
    """Return 403 Forbidden exception."""
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=detail,
    )


def not_found(detail: str = "Resource not found") -> HTTPException:
    """Return 404 Not Found exception."""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    )


def bad_request(detail: str = "Bad request") -> HTTPException:
    """Return 400 Bad Request exception."""
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
    )


def conflict(detail: str = "Resource already exists") -> HTTPException:
    """Return 409 Conflict exception."""
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=detail,
    )


def server_error(detail: str = "Internal error") -> HTTPException:
    """Return 500 Internal Server Error exception."""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    )


def unavailable(detail: str = "Service unavailable") -> HTTPException:
    """Return 503 Service Unavailable exception."""
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=detail,
    )
