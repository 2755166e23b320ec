"""FastAPI exception handlers for converting failures to HTTP responses.

Services return ``Failure`` values; routes raise them as ``FailureError``
via ``raise_for_failure`` and the handlers here render every error as
``{"ok": false, "error": <message>}``.

The FailureKind-to-HTTP status mapping:
- 400 Bad Request: invalid input (including request validation errors)
- 404 Not Found: unknown property
- 409 Conflict: requested dates overlap an existing reservation
- 500 Internal Server Error: payment gateway failure or anything unexpected

Usage:
    from staybook_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from typing import Any, TypeVar

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from staybook.models import FAILURE_MESSAGES, Failure, FailureKind
from staybook.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Map FailureKind to HTTP status codes
FAILURE_KIND_TO_HTTP_STATUS: dict[FailureKind, int] = {
    FailureKind.INVALID_INPUT: HTTP_400_BAD_REQUEST,
    FailureKind.NOT_FOUND: HTTP_404_NOT_FOUND,
    FailureKind.CONFLICT: HTTP_409_CONFLICT,
    FailureKind.UPSTREAM_FAILURE: HTTP_500_INTERNAL_SERVER_ERROR,
    FailureKind.INTERNAL: HTTP_500_INTERNAL_SERVER_ERROR,
}


class FailureError(Exception):
    """Carries a Failure from a route to the exception handlers."""

    def __init__(self, failure: Failure) -> None:
        super().__init__(failure.message)
        self.failure = failure


def raise_for_failure(result: T | Failure) -> T:
    """Return the result unchanged, or raise FailureError if it is a Failure."""
    if isinstance(result, Failure):
        raise FailureError(result)
    return result


def get_http_status_for_failure(kind: FailureKind) -> int:
    """Get HTTP status code for a FailureKind.

    Args:
        kind: The FailureKind to map

    Returns:
        HTTP status code, defaults to 500 if not explicitly mapped.
    """
    return FAILURE_KIND_TO_HTTP_STATUS.get(kind, HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the uniform error body."""
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


def failure_response(failure: Failure) -> JSONResponse:
    """Convert a Failure to a JSON response.

    Internal failures never expose their message to the client.
    """
    status_code = get_http_status_for_failure(failure.kind)
    message = failure.message
    if failure.kind == FailureKind.INTERNAL:
        message = FAILURE_MESSAGES[FailureKind.INTERNAL]
    return error_response(status_code, message)


def format_validation_message(errors: list[Any]) -> str:
    """Condense FastAPI validation errors into one message.

    Example:
        "checkin: Input should be a valid date or datetime, invalid date separator"
    """
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "header")]
        msg = error.get("msg", "invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


async def failure_error_handler(request: Request, exc: FailureError) -> JSONResponse:
    """Handle FailureError exceptions raised by routes."""
    failure = exc.failure
    if failure.kind in (FailureKind.UPSTREAM_FAILURE, FailureKind.INTERNAL):
        logger.error(
            "%s %s failed: %s (%s) details=%s",
            request.method,
            request.url.path,
            failure.kind.value,
            failure.message,
            failure.details,
        )
    return failure_response(failure)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation errors as 400 instead of FastAPI's 422."""
    return error_response(HTTP_400_BAD_REQUEST, format_validation_message(list(exc.errors())))


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Keep routing errors (404 unknown path, 405) in the uniform shape."""
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with a generic error response.

    The traceback is logged; the client only sees a generic message.
    """
    logger.exception("Unhandled exception: %s", exc)
    return error_response(HTTP_500_INTERNAL_SERVER_ERROR, FAILURE_MESSAGES[FailureKind.INTERNAL])


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(FailureError, failure_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
