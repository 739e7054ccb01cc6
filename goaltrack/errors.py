"""Error taxonomy and the exception handlers that map it onto the JSON envelope."""

import logging
import sqlite3

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base class for errors that carry their own HTTP status."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(APIError):
    """Missing or malformed input."""

    status_code = 400


class AuthenticationError(APIError):
    """Missing, invalid or expired credentials, or an ownership mismatch."""

    status_code = 401


class ForbiddenError(APIError):
    """Authenticated but lacking the required role."""

    status_code = 403


class NotFoundError(APIError):
    """Requested entity does not exist."""

    status_code = 404


def error_response(status_code: int, message) -> JSONResponse:
    """Build a failure envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return error_response(400, "; ".join(messages) or "Invalid request")


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    return error_response(400, str(exc))


async def database_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    # Never leak driver detail to the client
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return error_response(400, "Database error")


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return error_response(exc.status_code, exc.detail)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, str(exc) or "Server error")


def register_error_handlers(app: FastAPI):
    """Install the handlers, most specific first."""
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(sqlite3.Error, database_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
