"""HTTP middleware for request correlation and CORS.

``request_id_middleware``:
- Accepts incoming X-Request-ID header or generates a UUID
- Stores request_id in contextvars for log correlation
- Echoes request_id and request duration in response headers

``cors_middleware``:
- Answers every OPTIONS request with 204 and no body
- Adds the CORS headers of the configured origin to every response
- Converts unexpected exceptions to the generic 500 body so it carries them too

Usage:
    app.middleware("http")(cors_middleware)
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response

from app.core.exception_handlers import general_exception_handler
from app.core.logging import clear_request_id, set_request_id

ALLOW_METHODS = "GET, OPTIONS"
ALLOW_HEADERS = "Content-Type"


def cors_headers(allow_origin: str) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Vary": "Origin",
    }


async def request_id_middleware(request: Request, call_next) -> Response:
    """HTTP middleware for request ID generation and propagation.

    If the client provides the configured request id header (X-Request-ID by
    default), that value is reused; otherwise a new UUID is generated.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The downstream response with request id and duration headers.
    """

    header_name = request.app.state.settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


async def cors_middleware(request: Request, call_next) -> Response:
    """HTTP middleware emitting CORS headers and short-circuiting preflights."""

    headers = cors_headers(request.app.state.settings.proxy.allow_origin)
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=headers)

    try:
        response: Response = await call_next(request)
    except Exception as exc:
        response = await general_exception_handler(request, exc)
    response.headers.update(headers)
    return response
