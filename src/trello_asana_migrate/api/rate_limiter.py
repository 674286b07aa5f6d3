"""Rate limiting for Asana and Trello API calls."""

import asyncio
import time
from typing import Optional


class RateLimiter:
    """Token bucket rate limiter for API requests."""

    def __init__(
        self, requests_per_second: float = 10.0, burst: Optional[float] = None
    ):
        """Initialize rate limiter.

        Args:
            requests_per_second: Sustained requests per second allowed
            burst: Bucket capacity (defaults to one second worth of requests)
        """
        if requests_per_second <= 0:
            raise ValueError('requests_per_second must be positive')

        self.requests_per_second = requests_per_second
        self.capacity = max(1.0, burst if burst is not None else requests_per_second)
        self.tokens = self.capacity
        self.last_update = time.monotonic()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self.last_update
        self.tokens = min(
            self.capacity, self.tokens + elapsed * self.requests_per_second
        )
        self.last_update = now

    async def acquire(self) -> None:
        """Acquire a token for making a request.

        Blocks until a token is available. Waiters are served in arrival
        order because the sleep happens while holding the lock.
        """
        async with self._lock:
            self._refill()

            if self.tokens >= 1:
                self.tokens -= 1
                return

            sleep_time = (1 - self.tokens) / self.requests_per_second
            await asyncio.sleep(sleep_time)
            self._refill()
            self.tokens = max(0.0, self.tokens - 1)
