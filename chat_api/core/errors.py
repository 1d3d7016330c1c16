"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional so each error only carries what applies to it.
    """

    max_value: int
    actual_value: int
    retry_after: int
    reset_at: int
    limit: int
    remaining: int
    provider: str


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class PayloadTooLargeAppError(ValidationAppError):
    """Raised when an uploaded payload (e.g. an inline image) exceeds its limit."""


class LLMAppError(AppError):
    """Raised when LLM provider/client operations fail."""


class RateLimitAppError(AppError):
    """Raised by the HTTP layer when a client has exhausted its window quota.

    The limiter itself never raises; it returns ``admitted=False`` and the
    request dependency converts that into this error.
    """
