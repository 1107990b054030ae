"""
Map exceptions onto the `{error, details, success: false}` envelope.

Domain errors keep their message. Persistence failures and anything else
unexpected are logged with full detail and answered with a generic 500.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from deskbook.core.exceptions import AppError, InternalError
from deskbook.schemas.common import ApiError, FieldError
from deskbook.core.logging import get_logger

logger = get_logger(__name__)

LOCATION_ROOTS = {"body", "query", "path", "header"}


def _error(status_code: int, message: str, details=None) -> JSONResponse:
    body = ApiError(error=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _internal_error() -> JSONResponse:
    exc = InternalError("Internal server error")
    return _error(exc.status_code, exc.message)


def _field_name(loc) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in LOCATION_ROOTS and len(parts) > 1:
        parts = parts[1:]
    return ".".join(parts)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("domain_error", error=exc.message, path=request.url.path)
    return _error(exc.status_code, exc.message, exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        FieldError(field=_field_name(e["loc"]), message=e["msg"]).model_dump()
        for e in exc.errors()
    ]
    logger.info("validation_failed", path=request.url.path, errors=len(details))
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid input data", details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = _error(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("database_error", path=request.url.path, error=str(exc))
    return _internal_error()


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path, error=str(exc))
    return _internal_error()


EXCEPTION_HANDLERS = {
    AppError: app_error_handler,
    RequestValidationError: validation_error_handler,
    StarletteHTTPException: http_exception_handler,
    SQLAlchemyError: database_error_handler,
    Exception: unhandled_exception_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
