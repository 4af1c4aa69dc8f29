"""
Global exception handling for the application.
Every failure is rendered in the standard response envelope.
"""

import enum
from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from smartwatt.core.responses import api_response

logger = structlog.get_logger(__name__)


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

GENERIC_ERROR_MESSAGE = "Internal server error"


class AppError(Exception):
    """Base class for all application exceptions."""
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class ValidationException(AppError):
    """Missing or invalid input."""
    kind = ErrorKind.VALIDATION

    def __init__(self, message: str = "Invalid request", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class UnauthorizedException(AppError):
    """Authentication failure error."""
    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class ForbiddenException(AppError):
    """Authorization failure error."""
    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class EntityNotFoundException(AppError):
    """Resource not found, or not owned by the caller."""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Entity not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class ConflictException(AppError):
    """Duplicate record or a record that is still referenced."""
    kind = ErrorKind.CONFLICT

    def __init__(self, message: str = "Conflict", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.kind == ErrorKind.INTERNAL:
        logger.error("Internal application error", path=request.url.path, error=exc.message)
        return api_response(GENERIC_ERROR_MESSAGE, status_code=exc.status_code, success=False)
    return api_response(exc.message, status_code=exc.status_code, success=False)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return api_response(message, status_code=status.HTTP_400_BAD_REQUEST, success=False)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return api_response(str(exc.detail), status_code=exc.status_code, success=False)


def integrity_error_message(exc: IntegrityError) -> str:
    detail = str(exc.orig).lower()
    if "foreign key" in detail:
        return "Related record is missing or still in use"
    if "unique" in detail or "duplicate" in detail:
        return "A record with these values already exists"
    return "Request conflicts with existing data"


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity constraint violated", path=request.url.path, error=str(exc.orig))
    return api_response(
        integrity_error_message(exc),
        status_code=status.HTTP_409_CONFLICT,
        success=False,
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    logger.exception("Unhandled error", path=request.url.path)
    return api_response(
        GENERIC_ERROR_MESSAGE,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        success=False,
    )


def setup_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
