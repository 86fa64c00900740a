"""
Exception classes for API error handling.
Every error is rendered to the caller as {"error": message}.
"""

from typing import Any, Dict


class AppError(Exception):
    """Base application exception carrying an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str = "Internal server error", status_code: int = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Missing or malformed request field (400)."""

    status_code = 400


class ConflictError(AppError):
    """Uniqueness violation, e.g. duplicate email (400)."""

    status_code = 400


class NotFoundError(AppError):
    """Referenced record does not exist (404)."""

    status_code = 404


class UnauthorizedError(AppError):
    """Missing, invalid or expired credential (401)."""

    status_code = 401


class InternalError(AppError):
    """Unexpected store failure (500). Details never reach the caller."""

    status_code = 500


def error_response(error: AppError) -> Dict[str, Any]:
    return {"error": error.message}
