"""
Domain exceptions raised by the service layer.

Each carries the HTTP status it maps to; the API layer turns them into
the standard error envelope (see deskbook.api.exception_handlers).
"""

from typing import Any, Optional


class AppError(Exception):
    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class InvalidInputError(AppError):
    status_code = 400


class UnauthorizedError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class InternalError(AppError):
    status_code = 500
