"""
Application error model and the central exception handlers.

Services raise ``AppError`` (or one of its subclasses) to signal an expected,
operational failure. ``register_exception_handlers`` wires a FastAPI app so
that every failure, expected or not, ends in exactly one JSON response of the
shape::

    {"status": "error", "message": "..."}

Unrecognized exceptions are logged with their stack trace and answered with a
generic 500 message.
"""
from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any, Dict, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR_MESSAGE = "Internal Server Error"


class ErrorCode(IntEnum):
    """HTTP status codes used by application errors."""

    BAD_REQUEST = 400
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL_ERROR = 500


# PUBLIC_INTERFACE
class AppError(Exception):
    """
    An anticipated failure carrying an explicit HTTP status and a message that
    is safe to show to clients.
    """

    is_operational = True

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = ErrorCode(code)
        self.message = message

    @property
    def status_code(self) -> int:
        return int(self.code)

    def to_payload(self) -> Dict[str, Any]:
        return error_payload(self.message)


class BadRequestError(AppError):
    def __init__(self, message: str = "Bad Request") -> None:
        super().__init__(ErrorCode.BAD_REQUEST, message)


class NotFoundError(AppError):
    def __init__(self, message: str = "Not Found") -> None:
        super().__init__(ErrorCode.NOT_FOUND, message)


class ConflictError(AppError):
    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(ErrorCode.CONFLICT, message)


class InternalError(AppError):
    def __init__(self, message: str = INTERNAL_SERVER_ERROR_MESSAGE) -> None:
        super().__init__(ErrorCode.INTERNAL_ERROR, message)


def error_payload(message: str) -> Dict[str, Any]:
    return {"status": "error", "message": message}


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """
    Collapse pydantic error entries into one readable message, e.g.
    ``"Invalid request: body.title: String should have at least 1 character"``.
    """
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "Invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    if not parts:
        return "Invalid request"
    return "Invalid request: " + "; ".join(parts)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Respond with the error's own status and message."""
    if exc.code is ErrorCode.INTERNAL_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed path parameters or bodies are reported as 400 Bad Request."""
    message = format_validation_errors(exc.errors())
    logger.info("%s %s -> 400: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=int(ErrorCode.BAD_REQUEST), content=error_payload(message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors (unknown path, wrong method) keep their status but use our envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log anything unexpected and answer with a generic 500."""
    logger.exception("Unhandled error for %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=int(ErrorCode.INTERNAL_ERROR),
        content=error_payload(INTERNAL_SERVER_ERROR_MESSAGE),
    )


# PUBLIC_INTERFACE
def register_exception_handlers(app: FastAPI) -> None:
    """Install the central handlers on ``app``."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
