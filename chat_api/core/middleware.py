"""HTTP middleware: request correlation and CORS.

Every request/response pair carries a request id (taken from the incoming
header or generated) and the total handling time. The id is stored in
contextvars for the lifetime of the request so every log line emitted while
serving it can be correlated.

Usage:
    app.middleware("http")(request_id_middleware)
    add_cors_middleware(app)
"""

from __future__ import annotations

import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from chat_api.core.config import settings
from chat_api.core.logging import clear_request_id, set_request_id


async def request_id_middleware(request: Request, call_next) -> Response:
    """Propagate X-Request-ID and report X-Request-Duration-ms.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The downstream response with correlation headers added.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    request.state.request_id = request_id
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


def parse_origins(origins: str | None) -> list[str]:
    """Split a comma-separated origin list, dropping blanks."""

    if not origins:
        return []
    return [origin.strip() for origin in origins.split(",") if origin.strip()]


def add_cors_middleware(app: FastAPI) -> None:
    """Allow the browser front-end to call the API cross-origin."""

    origins = parse_origins(settings.app.cors_origins)
    if not origins:
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[
            settings.log.request_id_header,
            "Retry-After",
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Reset",
        ],
    )
