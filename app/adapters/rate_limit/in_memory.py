"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- A window starts at the first request of an identifier, not on a clock
  boundary, so bursts straddling two windows can admit up to twice the limit.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateRecord

logger = logging.getLogger(__name__)


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting requests per identifier in fixed windows.

    Expired records are removed opportunistically: each check has a
    ``cleanup_probability`` chance of sweeping the whole map.

    Important:
        This limiter is per-process only. If the API runs with multiple
        workers, each worker will enforce its own independent limits.
    """

    def __init__(
        self,
        *,
        max_requests: int,
        window_ms: int,
        cleanup_probability: float = 0.01,
        clock: Callable[[], float] = time.time,
        random_source: Callable[[], float] = random.random,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            max_requests: Maximum number of accepted requests per window.
            window_ms: Size of the window in milliseconds.
            cleanup_probability: Chance (0..1) that a check sweeps expired records.
            clock: Time source function returning UNIX time in seconds.
            random_source: Function returning a float in [0, 1).

        Raises:
            ValueError: If an argument is out of range.
        """
        super().__init__(max_requests=max_requests, window_ms=window_ms)
        if not 0.0 <= cleanup_probability <= 1.0:
            raise ValueError("cleanup_probability must be between 0 and 1")

        self._window_seconds = window_ms / 1000
        self._cleanup_probability = cleanup_probability
        self._clock = clock
        self._random = random_source
        self._lock = threading.RLock()
        self._records: dict[str, RateRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def get_record(self, identifier: str) -> RateRecord | None:
        """Return a copy of the stored record, mainly for inspection in tests."""
        with self._lock:
            record = self._records.get(identifier)
            return RateRecord(record.count, record.reset_time) if record else None

    def is_rate_limited(self, identifier: str) -> bool:
        """Count one request for ``identifier``.

        Args:
            identifier: Non-empty client key.

        Returns:
            False for the first ``max_requests`` requests of a window, True
            afterwards until the window expires.

        Raises:
            ValueError: If identifier is empty.
        """
        if not identifier:
            raise ValueError("identifier must be a non-empty string")

        now = self._clock()

        with self._lock:
            if self._random() < self._cleanup_probability:
                self._sweep_locked(now)

            record = self._records.get(identifier)
            if record is None or now > record.reset_time:
                self._records[identifier] = RateRecord(
                    count=1, reset_time=now + self._window_seconds
                )
                return False

            if record.count >= self.max_requests:
                return True

            record.count += 1
            return False

    def remaining(self, identifier: str) -> int:
        now = self._clock()
        with self._lock:
            record = self._records.get(identifier)
            if record is None or now > record.reset_time:
                return self.max_requests
            return max(0, self.max_requests - record.count)

    def sweep_expired(self) -> int:
        """Remove every record whose window has passed.

        Returns:
            Number of records removed.
        """
        with self._lock:
            return self._sweep_locked(self._clock())

    def reset(self) -> None:
        """Forget all records."""
        with self._lock:
            self._records.clear()

    def _sweep_locked(self, now: float) -> int:
        expired = [key for key, rec in self._records.items() if rec.reset_time < now]
        for key in expired:
            del self._records[key]
        if expired:
            logger.debug(
                "rate_limit.swept",
                extra={"removed": len(expired), "tracked": len(self._records)},
            )
        return len(expired)
