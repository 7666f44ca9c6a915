"""
Service Errors

Exception hierarchy shared by every feature module. Services raise
these; routers translate them into HTTP responses with
``to_http_exception``.
"""

from fastapi import HTTPException, status


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class PermissionDeniedError(ServiceError):
    """Raised on a tenant or role mismatch."""

    def __init__(self, message: str = "You do not have access to this resource."):
        super().__init__(
            message=message,
            error_code="PERMISSION_DENIED",
            status_code=status.HTTP_403_FORBIDDEN,
        )


class NotFoundError(ServiceError):
    """Raised when an entity does not exist."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            message=f"{entity_type.replace('_', ' ').capitalize()} not found: {entity_id}",
            error_code="NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
        )


class ValidationFailedError(ServiceError):
    """Raised for malformed input (e.g. password mismatch)."""

    def __init__(self, message: str, error_code: str = "VALIDATION_FAILED"):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )


class InvalidStatusTransitionError(ValidationFailedError):
    """Raised when a status change is not allowed by the state machine."""

    def __init__(self, entity_type: str, current_status: str, new_status: str):
        self.current_status = current_status
        self.new_status = new_status
        super().__init__(
            message=(
                f"Cannot transition {entity_type.replace('_', ' ')} "
                f"from '{current_status}' to '{new_status}'"
            ),
            error_code="INVALID_STATUS_TRANSITION",
        )


class ConflictError(ServiceError):
    """Raised when a unique value is already taken."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_409_CONFLICT,
        )


class TransientError(ServiceError):
    """Raised for backing-store or network faults. Never retried automatically."""

    def __init__(self, message: str = "The data store is temporarily unavailable."):
        super().__init__(
            message=message,
            error_code="TRANSIENT_ERROR",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


class RecoverableProfileError(ServiceError):
    """
    Profile lookup failure during sign-in.

    Absorbed by the identity resolver, which degrades to the fallback
    role. It is kept on the resulting Session for inspection but is
    never raised to callers.
    """

    def __init__(self, principal_id: str, reason: str):
        self.principal_id = principal_id
        self.reason = reason
        super().__init__(
            message=f"Profile lookup failed for {principal_id}: {reason}",
            error_code="PROFILE_UNAVAILABLE",
            status_code=status.HTTP_200_OK,
        )


def to_http_exception(error: ServiceError) -> HTTPException:
    """Convert a service error to an HTTPException with the standard body."""
    return HTTPException(
        status_code=error.status_code,
        detail={
            "error": error.error_code,
            "message": error.message,
        },
    )


def internal_error() -> HTTPException:
    """Generic 500 for unexpected failures."""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )


__all__ = [
    "ServiceError",
    "PermissionDeniedError",
    "NotFoundError",
    "ValidationFailedError",
    "InvalidStatusTransitionError",
    "ConflictError",
    "TransientError",
    "RecoverableProfileError",
    "to_http_exception",
    "internal_error",
]
