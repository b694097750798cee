"""Tests for AsyncRateLimiter."""

import asyncio
import time

import pytest

from core.rate_limiter import AsyncRateLimiter


class TestAsyncRateLimiter:
    """Test AsyncRateLimiter functionality."""

    def test_initialization(self):
        """Test rate limiter initialization."""
        limiter = AsyncRateLimiter(min_interval=0.5)
        assert limiter.min_interval == 0.5
        assert limiter.last_request_time is None

    def test_initialization_with_invalid_interval(self):
        """Test initialization with a negative interval."""
        with pytest.raises(ValueError, match="min_interval must not be negative"):
            AsyncRateLimiter(min_interval=-1.0)

    def test_per_second(self):
        """Test building a limiter from a request rate."""
        limiter = AsyncRateLimiter.per_second(4.0)
        assert limiter.min_interval == 0.25

        with pytest.raises(ValueError, match="requests_per_second must be positive"):
            AsyncRateLimiter.per_second(0)

    @pytest.mark.asyncio
    async def test_first_wait_no_delay(self):
        """Test that first wait doesn't delay."""
        limiter = AsyncRateLimiter(min_interval=1.0)

        start_time = time.time()
        waited = await limiter.wait()
        elapsed = time.time() - start_time

        assert waited == 0.0
        assert elapsed < 0.1
        assert limiter.last_request_time is not None

    @pytest.mark.asyncio
    async def test_subsequent_waits_respect_interval(self):
        """Test that subsequent waits respect the minimum interval."""
        limiter = AsyncRateLimiter(min_interval=0.2)

        await limiter.wait()
        first_time = limiter.last_request_time

        start_time = time.time()
        await limiter.wait()
        elapsed = time.time() - start_time

        assert 0.15 <= elapsed <= 0.35
        assert limiter.last_request_time > first_time

    @pytest.mark.asyncio
    async def test_concurrent_callers_are_serialized(self):
        """Test that concurrent callers are spaced one interval apart."""
        limiter = AsyncRateLimiter(min_interval=0.1)

        start_time = time.time()
        await asyncio.gather(*(limiter.wait() for _ in range(3)))
        elapsed = time.time() - start_time

        assert 0.18 <= elapsed <= 0.4

    @pytest.mark.asyncio
    async def test_zero_interval_never_waits(self):
        """Test that a zero interval disables limiting."""
        limiter = AsyncRateLimiter(min_interval=0)

        for _ in range(3):
            assert await limiter.wait() == 0.0

    @pytest.mark.asyncio
    async def test_reset(self):
        """Test that reset lets the next call through immediately."""
        limiter = AsyncRateLimiter(min_interval=5.0)
        await limiter.wait()

        limiter.reset()

        assert limiter.last_request_time is None
        assert await limiter.wait() == 0.0

    @pytest.mark.asyncio
    async def test_custom_clock(self):
        """Test the computed wait with an injected clock."""
        now = [10.0]
        limiter = AsyncRateLimiter(min_interval=3.0, clock=lambda: now[0])

        await limiter.wait()
        now[0] = 12.999

        waited = await limiter.wait()

        assert waited == pytest.approx(0.001)
