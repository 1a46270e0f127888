"""Error types raised by the services and their JSON rendering.

Every ``AppError`` reaches the client as::

    {"success": false, "error": {"code": ..., "message": ..., "details": ...}}

Subclasses fix the HTTP status and error code; the keyword arguments they
accept end up in ``details``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, **details: Any):
        self.message = message or self.default_message
        self.details = {key: value for key, value in details.items() if value is not None}
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details or None,
            },
        }


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_message = "Resource not found"

    def __init__(self, message: str | None = None, resource: str | None = None):
        super().__init__(message, resource=resource)


class ValidationError(AppError):
    """A business rule rejected the input (400).

    ``errors`` lists every broken rule when a whole record was checked at once.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    default_message = "Validation failed"

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        errors: list[str] | None = None,
    ):
        super().__init__(message, field=field, errors=errors or None)


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_message = "Resource conflict"

    def __init__(self, message: str | None = None, resource: str | None = None):
        super().__init__(message, resource=resource)


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHORIZED"
    default_message = "Authentication required"

    def __init__(self, message: str | None = None):
        super().__init__(message)


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"
    default_message = "Access denied"

    def __init__(self, message: str | None = None, capability: str | None = None):
        super().__init__(message, capability=capability)


class InvalidPatternError(AppError):
    """A recurrence pattern that cannot produce a schedule (422)."""

    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    error_code = "INVALID_PATTERN"
    default_message = "Invalid recurrence pattern"

    def __init__(self, message: str | None = None, field: str | None = None):
        super().__init__(message, field=field)


class UnknownStatusError(AppError):
    """A stored subscription carries a status outside the known set (500)."""

    error_code = "UNKNOWN_STATUS"

    def __init__(self, status_value: str, record_id: str | None = None):
        super().__init__(
            f"Unknown subscription status: {status_value!r}",
            status=status_value,
            record_id=record_id,
        )


class HasActiveDependentsError(AppError):
    """Delete refused while active records still point at the resource (409)."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "HAS_ACTIVE_DEPENDENTS"
    default_message = "Resource still has active dependents"

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        dependents: int = 0,
    ):
        super().__init__(message, resource=resource, dependents=dependents)


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "%s %s failed with %s: %s",
        request.method,
        request.url.path,
        exc.error_code,
        exc.message,
        extra={"details": exc.details},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=AppError().to_body(),
    )


def register_exception_handlers(app: FastAPI, *, debug: bool = False) -> None:
    """Install the JSON error handlers; with ``debug`` unexpected errors propagate."""
    app.add_exception_handler(AppError, app_exception_handler)  # type: ignore[arg-type]
    if not debug:
        app.add_exception_handler(Exception, unhandled_exception_handler)
