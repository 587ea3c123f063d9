"""Rate limiting and usage accounting for places provider calls.

Every call that actually reaches the provider goes through ``throttle``,
which enforces a minimum spacing between consecutive calls and counts them
for cost estimation. Concurrent callers queue on an ``asyncio.Lock`` so the
spacing holds even when type queries and detail fetches run in parallel.
"""

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

# Google Places list prices in USD per request
NEARBY_SEARCH_COST = 0.032
PLACE_DETAILS_COST = 0.017
PHOTO_COST = 0.007

REQUESTS_PER_MINUTE_WINDOW = 60.0


@dataclass(frozen=True)
class UsageStats:
    """Snapshot of provider usage since process start."""

    total_requests: int
    requests_per_minute: int
    estimated_cost: float

    def to_dict(self) -> dict:
        return {
            "total_requests": self.total_requests,
            "requests_per_minute": self.requests_per_minute,
            "estimated_cost": self.estimated_cost,
        }


class RateLimiter:
    """Minimum-spacing limiter with a process-lifetime request counter.

    Attributes:
        _min_interval: Minimum spacing between calls, in seconds.
        _last_request_at: Clock reading when the previous call was released.
        _request_count: Total throttled calls; never decreases.
    """

    def __init__(
        self,
        min_interval_ms: float = 100,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the limiter.

        Args:
            min_interval_ms: Minimum spacing between calls in milliseconds.
            clock: Monotonic clock returning seconds.
            sleep: Coroutine used to wait; injectable for tests.
        """
        if min_interval_ms < 0:
            raise ValueError("min_interval_ms must not be negative")
        self._min_interval = min_interval_ms / 1000.0
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_request_at: float | None = None
        self._request_count = 0
        self._recent: deque[float] = deque()

    @property
    def min_interval_ms(self) -> float:
        return self._min_interval * 1000.0

    @property
    def total_requests(self) -> int:
        return self._request_count

    async def throttle(self) -> None:
        """Wait until the minimum spacing since the previous call has elapsed.

        Always succeeds. Records the release time and increments the
        request counter.
        """
        async with self._lock:
            if self._last_request_at is not None:
                # Loop because the event loop may wake a sleeper marginally early
                while True:
                    remaining = self._min_interval - (self._clock() - self._last_request_at)
                    if remaining <= 0:
                        break
                    logger.debug(f"[RATE] Waiting {remaining * 1000:.0f}ms before next provider call")
                    await self._sleep(remaining)

            now = self._clock()
            self._last_request_at = now
            self._request_count += 1
            self._recent.append(now)
            self._prune(now)

    def _prune(self, now: float) -> None:
        while self._recent and now - self._recent[0] >= REQUESTS_PER_MINUTE_WINDOW:
            self._recent.popleft()

    def estimated_cost(self) -> float:
        """Estimated spend in USD, assuming each request used search, details and a photo."""
        per_request = NEARBY_SEARCH_COST + PLACE_DETAILS_COST + PHOTO_COST
        return round(self._request_count * per_request, 4)

    def usage_stats(self) -> UsageStats:
        self._prune(self._clock())
        return UsageStats(
            total_requests=self._request_count,
            requests_per_minute=len(self._recent),
            estimated_cost=self.estimated_cost(),
        )
