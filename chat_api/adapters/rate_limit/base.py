"""Rate limiter interfaces.

The API should depend on this abstraction (not the concrete implementation)
so we can swap storage backends later with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single admission check.

    Attributes:
        admitted: Whether the request may proceed.
        limit: The max admissions per window supplied on this call.
        remaining: Admissions left in the current window (0 when rejected).
        reset_at: UNIX epoch milliseconds when the current window ends.
        retry_after_seconds: Suggested wait in whole seconds when rejected.
    """

    admitted: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None = None


class AbstractRateLimiter(ABC):
    """Interface for per-key admission limiters."""

    @abstractmethod
    def check(self, key: str, max_requests: int, window_ms: int) -> RateLimitResult:
        """Admit or reject one request for ``key``.

        Args:
            key: Opaque client identity (e.g. ``"chat:203.0.113.7"``).
            max_requests: Admissions allowed per window.
            window_ms: Window length in milliseconds.

        Returns:
            RateLimitResult describing the decision. Quota exhaustion is a
            normal result (``admitted=False``), not an exception.
        """
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Drop all tracked windows."""
        raise NotImplementedError
