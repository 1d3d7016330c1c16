"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: API routes depend on a dependency function only.
- Explicit ownership: the limiter lives on ``app.state`` and is created by the
  application factory, so each app (and each test) gets its own table.
- Swap-friendly: storage backend can be replaced behind AbstractRateLimiter.

Rate limiting strategy:
- Fixed window per client address and route (``chat:<address>``).
- The client address is the first entry of X-Forwarded-For, or ``unknown``.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request, Response

from chat_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from chat_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from chat_api.core.config import AppSettings, settings
from chat_api.core.errors import RateLimitAppError

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def build_rate_limiter(app_settings: AppSettings | None = None) -> AbstractRateLimiter:
    """Create the limiter instance owned by one application.

    Args:
        app_settings: Optional settings; defaults to global app settings.

    Returns:
        AbstractRateLimiter: A fresh, empty limiter.
    """

    cfg = app_settings or settings.app
    return InMemoryFixedWindowRateLimiter(
        max_keys=cfg.rate_limit_max_keys,
        sweep_interval_ms=cfg.rate_limit_sweep_interval_ms,
    )


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter attached to the running application."""

    limiter: AbstractRateLimiter | None = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        limiter = build_rate_limiter()
        request.app.state.rate_limiter = limiter
    return limiter


def client_address(request: Request) -> str:
    """Derive the client address from the forwarded-address header.

    Examples:
        ``"203.0.113.7, 10.0.0.1"`` -> ``"203.0.113.7"``
        missing or blank header -> ``"unknown"``
    """

    forwarded = request.headers.get(settings.app.client_address_header)
    if not forwarded:
        return UNKNOWN_CLIENT
    first = forwarded.split(",")[0].strip()
    return first or UNKNOWN_CLIENT


def build_rate_limit_key(request: Request, route: str = "chat") -> str:
    """Build the namespaced limiter key for the current request."""

    return f"{route}:{client_address(request)}"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    """Render X-RateLimit-* headers (plus Retry-After when rejected)."""

    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_at),
    }
    if result.retry_after_seconds is not None:
        headers["Retry-After"] = str(result.retry_after_seconds)
    return headers


async def enforce_rate_limit(request: Request, response: Response) -> RateLimitResult | None:
    """FastAPI dependency enforcing the per-client chat limit.

    When enabled, consumes one admission from the caller's window. The result
    is stored on ``request.state.rate_limit`` so handlers can report the
    remaining quota.

    Args:
        request: FastAPI request.
        response: Response used to attach X-RateLimit-* headers on success.

    Returns:
        The limiter result, or None when rate limiting is disabled.

    Raises:
        RateLimitAppError: When the caller's window quota is exhausted.
    """

    if not settings.app.rate_limit_enabled:
        request.state.rate_limit = None
        return None

    limiter = get_rate_limiter(request)
    key = build_rate_limit_key(request)
    key_hash = _hash_limiter_key(key)

    result = limiter.check(
        key,
        settings.app.rate_limit_max,
        settings.app.rate_limit_window_ms,
    )
    request.state.rate_limit = result

    if result.admitted:
        logger.info(
            "rate_limit.allowed",
            extra={
                "key_hash": key_hash,
                "limit": result.limit,
                "remaining": result.remaining,
                "window_ms": settings.app.rate_limit_window_ms,
            },
        )
        if settings.app.rate_limit_include_headers:
            response.headers.update(rate_limit_headers(result))
        return result

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": key_hash,
            "limit": result.limit,
            "remaining": result.remaining,
            "window_ms": settings.app.rate_limit_window_ms,
            "retry_after_s": retry_after,
        },
    )

    raise RateLimitAppError(
        code="rate_limit_exceeded",
        message="Rate limit exceeded. Try again later.",
        details={
            "reset_at": result.reset_at,
            "retry_after": retry_after,
            "limit": result.limit,
            "remaining": result.remaining,
        },
    )
