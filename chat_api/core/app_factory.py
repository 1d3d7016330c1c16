"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers and the
app-owned rate limiter) so tests can build isolated instances.
"""

from __future__ import annotations

from fastapi import FastAPI

from chat_api.adapters.rate_limit.base import AbstractRateLimiter
from chat_api.api.routes import chat_router, health_router
from chat_api.core.config import settings
from chat_api.core.exception_handlers import setup_exception_handlers
from chat_api.core.logging import configure_logging
from chat_api.core.middleware import add_cors_middleware, request_id_middleware
from chat_api.core.openapi import apply_openapi_customizations
from chat_api.core.rate_limit import build_rate_limiter
from chat_api.services.chat_service import ChatService


def create_app(
    *,
    rate_limiter: AbstractRateLimiter | None = None,
    chat_service: ChatService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        rate_limiter: Limiter to own; a fresh in-memory one by default.
        chat_service: Pre-built chat service; created lazily on first chat
            request when omitted.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Chat API",
        description=(
            "Forwards text and image chat messages to a hosted generative model "
            "and returns its reply. Requests are throttled per client address "
            "with a fixed-window limit."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    if rate_limiter is None:
        rate_limiter = build_rate_limiter(settings.app)
    app.state.rate_limiter = rate_limiter
    app.state.chat_service = chat_service

    # Middleware
    app.middleware("http")(request_id_middleware)
    add_cors_middleware(app)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(chat_router, prefix="/api")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
