"""Async rate limiter enforcing a minimum spacing between calls."""

import asyncio
import time
from typing import Callable

from core.log import get_logger

logger = get_logger(__name__)


class AsyncRateLimiter:
    """Single-slot limiter: a call arriving too soon sleeps until its turn."""

    def __init__(
        self,
        min_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize rate limiter.

        Args:
            min_interval: Minimum number of seconds between two calls.
                          Zero disables limiting.
            clock: Monotonic time source, replaceable in tests.
        """
        if min_interval < 0:
            raise ValueError("min_interval must not be negative")

        self.min_interval = min_interval
        self.last_request_time: float | None = None
        self._clock = clock
        self._lock = asyncio.Lock()

    @classmethod
    def per_second(cls, requests_per_second: float) -> "AsyncRateLimiter":
        """Build a limiter from a requests-per-second budget."""
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        return cls(min_interval=1.0 / requests_per_second)

    async def wait(self) -> float:
        """Wait if necessary to respect the spacing.

        Returns:
            Seconds spent waiting.
        """
        async with self._lock:
            waited = 0.0
            if self.last_request_time is not None:
                elapsed = self._clock() - self.last_request_time
                if elapsed < self.min_interval:
                    waited = self.min_interval - elapsed
                    logger.debug(f"Rate limiting: waiting {waited:.2f}s")
                    await asyncio.sleep(waited)

            self.last_request_time = self._clock()
            return waited

    def reset(self) -> None:
        """Forget the previous call so the next one runs immediately."""
        self.last_request_time = None
