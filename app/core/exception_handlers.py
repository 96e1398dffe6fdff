"""Global exception handlers for consistent error responses.

Domain errors are converted to the proxy's flat JSON error bodies:
- ValidationAppError / InvalidActionError → 400 ``{"error": <message>}``
- RateLimitedError → 429 ``{"error": "rate_limited", "window_ms", "max"}``
- UpstreamError → 500 ``{"error": "server_error", "detail": <message>}``
- Unexpected Exception → 500 with a generic detail (no stack trace leaked)
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.errors import (
    AppError,
    InvalidActionError,
    RateLimitedError,
    UpstreamError,
    ValidationAppError,
)
from app.core.logging import get_request_id

logger = logging.getLogger(__name__)


def _error_response(exc: AppError) -> JSONResponse:
    details = exc.details or {}

    if isinstance(exc, RateLimitedError):
        headers = details.get("context", {}).get("headers") or None
        return JSONResponse(
            status_code=429,
            content={
                "error": "rate_limited",
                "window_ms": details.get("window_ms"),
                "max": details.get("max"),
            },
            headers=headers,
        )

    if isinstance(exc, (ValidationAppError, InvalidActionError)):
        return JSONResponse(status_code=400, content={"error": exc.message})

    return JSONResponse(
        status_code=500,
        content={"error": "server_error", "detail": exc.message},
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the status code and body of the error type.
    """
    response = _error_response(exc)

    log = logger.error if isinstance(exc, UpstreamError) else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": response.status_code,
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )
    return response


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs the exception type and message but returns a generic detail.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={"error": "server_error", "detail": "unexpected error"},
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Example:
        >>> from fastapi import FastAPI
        >>> from app.core.exception_handlers import setup_exception_handlers
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
