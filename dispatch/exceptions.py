"""
Custom exception hierarchy for consistent error responses.

Usage:
    from dispatch.exceptions import NotFoundError, ForbiddenError, ConflictError

    raise NotFoundError("Appointment", appointment_id)
    raise ForbiddenError("Admin access required")
    raise ConflictError("Absence has already been decided")
    raise InvalidDateFormatError("31.02.2024")

These exceptions are caught by the handler registered in main.py and
converted to consistent JSON error responses with the shape:
    {"error": "<message>", "detail": <optional extra info>}
"""

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base application error with a default status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, detail: Any = None):
        super().__init__(
            status_code=self.__class__.status_code,
            detail=message,
        )
        self.extra_detail = detail


class NotFoundError(AppError):
    """Resource not found (404)."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, resource_id: int | str | None = None):
        if resource_id is not None:
            message = f"{resource} not found (id={resource_id})"
        else:
            message = f"{resource} not found"
        super().__init__(message)


class ForbiddenError(AppError):
    """Forbidden access (403)."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class UnauthorizedError(AppError):
    """Unauthorized access (401)."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ConflictError(AppError):
    """Resource conflict (409)."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str, detail: Any = None):
        super().__init__(message, detail)


class ConfirmationRequiredError(ConflictError):
    """
    Soft validation failure (409).

    The request is acceptable but needs an explicit confirmation; the
    warnings are returned in ``detail`` so the caller can ask the user
    and retry with ``force``/``confirm`` set.
    """

    def __init__(self, message: str, warnings: list[str]):
        super().__init__(message, detail=warnings)
        self.warnings = warnings


class ValidationError(AppError):
    """Validation error (400)."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)


class InvalidDateFormatError(ValidationError):
    """A date or clock-time value could not be parsed (400)."""

    def __init__(self, value: object, expected: str = "YYYY-MM-DD"):
        super().__init__(f"Invalid date format: {value!r} (expected {expected})")
        self.value = value


class ServiceError(AppError):
    """Internal service error (500)."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
