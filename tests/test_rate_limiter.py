"""Tests for the token bucket rate limiter."""

import time

import pytest

from trello_asana_migrate.api.rate_limiter import RateLimiter


class TestRateLimiter:
    """Test cases for RateLimiter."""

    def test_invalid_rate(self):
        with pytest.raises(ValueError):
            RateLimiter(0)

    def test_capacity_defaults_to_rate(self):
        assert RateLimiter(5).capacity == 5
        assert RateLimiter(0.5).capacity == 1.0
        assert RateLimiter(5, burst=2).capacity == 2

    @pytest.mark.asyncio
    async def test_burst_is_immediate(self):
        limiter = RateLimiter(100, burst=3)

        start = time.monotonic()
        for _ in range(3):
            await limiter.acquire()

        assert time.monotonic() - start < 0.05

    @pytest.mark.asyncio
    async def test_empty_bucket_blocks(self):
        limiter = RateLimiter(50, burst=1)
        await limiter.acquire()

        start = time.monotonic()
        await limiter.acquire()

        assert time.monotonic() - start >= 0.01

    def test_fresh_bucket_is_full(self):
        limiter = RateLimiter(10)
        assert limiter.tokens == limiter.capacity == 10
