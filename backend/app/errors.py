"""Application error kinds and the handlers that turn them into JSON envelopes.

Services raise ``AppError(kind, message)`` before touching the database; the
handlers registered here are the only place that knows HTTP status codes.
"""
import enum
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    validation_error = "VALIDATION_ERROR"
    no_fields_to_update = "NO_FIELDS_TO_UPDATE"
    invalid_token = "INVALID_TOKEN"
    token_expired = "TOKEN_EXPIRED"
    pending_approval = "PENDING_APPROVAL"
    forbidden = "FORBIDDEN"
    not_found = "NOT_FOUND"
    duplicate_phone = "DUPLICATE_PHONE"
    conflict = "CONFLICT"
    database_error = "DATABASE_ERROR"
    internal_error = "INTERNAL_ERROR"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.validation_error: status.HTTP_400_BAD_REQUEST,
    ErrorKind.no_fields_to_update: status.HTTP_400_BAD_REQUEST,
    ErrorKind.invalid_token: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.token_expired: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.pending_approval: status.HTTP_403_FORBIDDEN,
    ErrorKind.forbidden: status.HTTP_403_FORBIDDEN,
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.duplicate_phone: status.HTTP_409_CONFLICT,
    ErrorKind.conflict: status.HTTP_409_CONFLICT,
    ErrorKind.database_error: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.internal_error: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_KIND_BY_STATUS = {
    status.HTTP_400_BAD_REQUEST: ErrorKind.validation_error,
    status.HTTP_401_UNAUTHORIZED: ErrorKind.invalid_token,
    status.HTTP_403_FORBIDDEN: ErrorKind.forbidden,
    status.HTTP_404_NOT_FOUND: ErrorKind.not_found,
    status.HTTP_409_CONFLICT: ErrorKind.conflict,
}


class AppError(Exception):
    """A failed operation-level check, tagged with its ErrorKind."""

    def __init__(self, kind: ErrorKind, message: str, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.errors = errors

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


def error_body(kind: ErrorKind, message: str, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "code": kind.value, "message": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


def _diagnostic(exc: Exception) -> Optional[str]:
    """Raw exception text, withheld in production."""
    if settings.is_production:
        return None
    return f"{type(exc).__name__}: {exc}"


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return errors


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.kind.value, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.kind, exc.message, errors=exc.errors),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = _field_errors(exc)
    logger.info("%s %s -> invalid input: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=STATUS_BY_KIND[ErrorKind.validation_error],
        content=error_body(ErrorKind.validation_error, "Invalid input", errors=errors),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = "The requested resource was not found"
    else:
        message = str(exc.detail)
    kind = _KIND_BY_STATUS.get(exc.status_code, ErrorKind.internal_error)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(kind, message),
        headers=getattr(exc, "headers", None),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    if isinstance(exc, OperationalError):
        message = "Could not reach the database. Please try again shortly."
    else:
        message = "A database error occurred"
    return JSONResponse(
        status_code=STATUS_BY_KIND[ErrorKind.database_error],
        content=error_body(ErrorKind.database_error, message, detail=_diagnostic(exc)),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=STATUS_BY_KIND[ErrorKind.internal_error],
        content=error_body(ErrorKind.internal_error, "Internal server error", detail=_diagnostic(exc)),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
