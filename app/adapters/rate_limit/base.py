"""Rate limiter interfaces.

The API should depend on this abstraction (not the concrete implementation)
so we can swap storage backends later with minimal changes.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class RateRecord:
    """Per-identifier counter for the current window.

    Attributes:
        count: Requests observed in the current window.
        reset_time: UNIX time (seconds) at which the window expires.
    """

    count: int
    reset_time: float


class AbstractRateLimiter(ABC):
    """Interface for fixed-window rate limiters."""

    def __init__(self, *, max_requests: int, window_ms: int) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_ms < 1:
            raise ValueError("window_ms must be >= 1")

        self.max_requests = max_requests
        self.window_ms = window_ms

    @property
    def retry_after_seconds(self) -> int:
        """Whole seconds a rejected client is told to wait (``Retry-After``)."""
        return int(math.ceil(self.window_ms / 1000))

    @abstractmethod
    def is_rate_limited(self, identifier: str) -> bool:
        """Record a request for ``identifier`` and report whether it is over quota.

        Args:
            identifier: Client key (e.g. IP address).

        Returns:
            True when the request must be rejected.
        """
        raise NotImplementedError

    @abstractmethod
    def remaining(self, identifier: str) -> int:
        """Requests still allowed for ``identifier`` in its current window."""
        raise NotImplementedError
