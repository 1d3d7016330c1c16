"""In-memory fixed-window admission limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: one lock guards the read-compare-write on every record.
- Bounded: expired windows are swept periodically and the number of tracked
  keys is capped with LRU eviction, so many distinct clients cannot grow the
  table without limit.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from chat_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult

logger = logging.getLogger(__name__)


def epoch_ms() -> int:
    """Current UNIX time in whole milliseconds."""
    return int(time.time() * 1000)


@dataclass
class _WindowRecord:
    remaining: int
    expires_at: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Fixed-window limiter keyed by opaque client identity.

    A window starts on the first request for a key (not on a wall-clock
    boundary) and lasts ``window_ms``. The first request already consumes one
    slot, so ``max_requests=1`` admits exactly one request per window.

    ``max_requests`` and ``window_ms`` are passed on every call rather than
    bound to the key. They only take effect when a window is created; a live
    window keeps the budget and expiry it was created with.

    Important:
        Windows are evaluated lazily on access. Stale records stay in memory
        until they are touched again, swept, or pushed out by the key cap.
    """

    def __init__(
        self,
        *,
        max_keys: int | None = 10000,
        sweep_interval_ms: int = 60000,
        clock: Callable[[], int] = epoch_ms,
    ) -> None:
        """Initialize the limiter.

        Args:
            max_keys: Maximum number of tracked keys; least recently used keys
                are evicted beyond this (None disables the cap).
            sweep_interval_ms: Minimum time between sweeps of expired windows.
            clock: Time source returning UNIX time in milliseconds.
        """
        self._max_keys = max_keys
        self._sweep_interval_ms = sweep_interval_ms
        self._clock = clock
        self._lock = threading.RLock()
        self._records: OrderedDict[str, _WindowRecord] = OrderedDict()
        self._next_sweep_at = 0
        self._expired_evictions = 0
        self._capacity_evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"InMemoryFixedWindowRateLimiter(max_keys={self._max_keys}, "
            f"sweep_interval_ms={self._sweep_interval_ms}, keys={len(self._records)})"
        )

    def check(self, key: str, max_requests: int, window_ms: int) -> RateLimitResult:
        """Admit or reject one request for ``key``.

        Args:
            key: Opaque client identity.
            max_requests: Admissions allowed per window (caller guarantees > 0).
            window_ms: Window length in milliseconds (caller guarantees > 0).

        Returns:
            RateLimitResult with the decision, remaining quota and reset time.
        """
        now = int(self._clock())

        with self._lock:
            self._maybe_sweep_locked(now)

            record = self._records.get(key)
            if record is None or record.expires_at <= now:
                record = _WindowRecord(remaining=max_requests - 1, expires_at=now + window_ms)
                self._records[key] = record
                self._records.move_to_end(key)
                self._evict_if_over_capacity_locked(now)
                return RateLimitResult(
                    admitted=True,
                    limit=max_requests,
                    remaining=record.remaining,
                    reset_at=record.expires_at,
                )

            self._records.move_to_end(key)

            if record.remaining <= 0:
                return RateLimitResult(
                    admitted=False,
                    limit=max_requests,
                    remaining=0,
                    reset_at=record.expires_at,
                    retry_after_seconds=max(0, math.ceil((record.expires_at - now) / 1000)),
                )

            record.remaining -= 1
            return RateLimitResult(
                admitted=True,
                limit=max_requests,
                remaining=record.remaining,
                reset_at=record.expires_at,
            )

    def sweep(self) -> int:
        """Remove every expired window.

        Returns:
            Number of records removed.
        """
        with self._lock:
            return self._sweep_locked(int(self._clock()))

    def clear(self) -> None:
        """Remove all tracked windows and reset counters."""
        with self._lock:
            self._records.clear()
            self._next_sweep_at = 0
            self._expired_evictions = 0
            self._capacity_evictions = 0

    def stats(self) -> dict[str, int | None]:
        """Return lightweight limiter metrics without exposing keys."""
        with self._lock:
            return {
                "keys": len(self._records),
                "max_keys": self._max_keys,
                "expired_evictions": self._expired_evictions,
                "capacity_evictions": self._capacity_evictions,
            }

    def _maybe_sweep_locked(self, now: int) -> None:
        if now < self._next_sweep_at:
            return
        self._sweep_locked(now)

    def _sweep_locked(self, now: int) -> int:
        expired_keys = [k for k, record in self._records.items() if record.expires_at <= now]
        for key in expired_keys:
            del self._records[key]
        self._expired_evictions += len(expired_keys)
        self._next_sweep_at = now + self._sweep_interval_ms

        if expired_keys:
            logger.debug(
                "rate_limit.swept",
                extra={"evicted": len(expired_keys), "keys": len(self._records)},
            )
        return len(expired_keys)

    def _evict_if_over_capacity_locked(self, now: int) -> None:
        if self._max_keys is None or len(self._records) <= self._max_keys:
            return

        # Expired windows go first; only then drop live ones, oldest access first.
        self._sweep_locked(now)
        evicted = 0
        while len(self._records) > self._max_keys:
            self._records.popitem(last=False)
            evicted += 1
        self._capacity_evictions += evicted

        if evicted:
            logger.warning(
                "rate_limit.capacity_eviction",
                extra={"evicted": evicted, "max_keys": self._max_keys},
            )
