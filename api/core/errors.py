"""
Application error kinds and their HTTP mapping.

Services raise `AppError` subclasses; `register_error_handlers` turns them into
JSON responses in one place. Anything else that escapes a handler is logged
and reported as `internal`.
"""

from __future__ import annotations

import logging
from enum import Enum

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    INTERNAL = "internal"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.PAYLOAD_TOO_LARGE: 413,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class AppError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class UnauthenticatedError(AppError):
    kind = ErrorKind.UNAUTHENTICATED


class ForbiddenError(AppError):
    kind = ErrorKind.FORBIDDEN


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT


class PayloadTooLargeError(AppError):
    kind = ErrorKind.PAYLOAD_TOO_LARGE


def error_response(kind: ErrorKind, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_KIND[kind],
        content={"message": message, "error": kind.value},
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        msg = str(err.get("msg") or "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request."


async def _handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.kind is ErrorKind.INTERNAL:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return error_response(exc.kind, exc.message)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(ErrorKind.VALIDATION, _format_validation_errors(exc))


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "%s on %s %s (500): %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return error_response(ErrorKind.INTERNAL, "Internal server error.")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _handle_app_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected)
