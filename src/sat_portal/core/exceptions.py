"""
Portal Exceptions

Every error raised by the domain layer derives from ``PortalError`` and
carries a machine-readable error code plus the HTTP status used when it
reaches the API boundary. No error is fatal to the process: each one is
scoped to the request that triggered it.
"""

from collections.abc import Sequence

from fastapi import HTTPException


class PortalError(Exception):
    """Base exception for portal errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ValidationError(PortalError):
    """A required field or file is missing at submit time."""

    def __init__(self, message: str, missing_fields: Sequence[str] = ()):
        self.missing_fields = list(missing_fields)
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
        )


class IncompleteScheduleError(PortalError):
    """Schedule information is missing a required field."""

    def __init__(self, message: str, missing_fields: Sequence[str] = ()):
        self.missing_fields = list(missing_fields)
        super().__init__(
            message=message,
            error_code="INCOMPLETE_SCHEDULE",
            status_code=400,
        )


class InvalidStatusTransitionError(PortalError):
    """Raised when an entity is not in a state that allows the requested transition."""

    def __init__(self, current_status: str, new_status: str, valid: Sequence[str] = ()):
        self.current_status = current_status
        self.new_status = new_status
        super().__init__(
            message=(
                f"Invalid status transition: {current_status} -> {new_status}. "
                f"Valid transitions: {list(valid)}"
            ),
            error_code="INVALID_STATUS_TRANSITION",
            status_code=409,
        )


class NotFoundError(PortalError):
    """Raised when an entity does not exist."""

    def __init__(self, kind: str, entity_id: str | None = None):
        message = f"{kind} {entity_id} not found" if entity_id else f"{kind} not found"
        super().__init__(message=message, error_code="NOT_FOUND", status_code=404)


class UploadFailure(PortalError):
    """A file could not be written to storage. Soft: callers keep the previous reference."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="UPLOAD_FAILED", status_code=502)


class TemplateError(PortalError):
    """The document template is absent or cannot be opened."""

    def __init__(self, message: str = "No master template uploaded"):
        super().__init__(message=message, error_code="TEMPLATE_ERROR", status_code=422)


class RenderError(PortalError):
    """Placeholder substitution or document packaging failed."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="RENDER_ERROR", status_code=500)


class RemoteError(PortalError):
    """A read or write against the store failed. Nothing was committed."""

    def __init__(self, message: str = "The data store is unavailable. Please retry."):
        super().__init__(message=message, error_code="REMOTE_ERROR", status_code=503)


class AuthenticationError(PortalError):
    """Sign-in failed or the caller is not authenticated."""

    def __init__(self, message: str = "Invalid email or password."):
        super().__init__(message=message, error_code="AUTHENTICATION_FAILED", status_code=401)


def to_http_exception(error: PortalError) -> HTTPException:
    """Convert a portal error into the API's error response."""
    return HTTPException(
        status_code=error.status_code,
        detail={
            "error": error.error_code,
            "message": error.message,
        },
    )
