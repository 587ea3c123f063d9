"""Unit tests for the provider rate limiter."""

import asyncio
import time

import pytest

from nightpulse.services.rate_limiter import RateLimiter
from tests.unit.fakes import FakeClock


class TestRateLimiterInit:
    """Tests for RateLimiter construction."""

    def test_default_spacing(self) -> None:
        limiter = RateLimiter()
        assert limiter.min_interval_ms == 100
        assert limiter.total_requests == 0

    def test_negative_spacing_rejected(self) -> None:
        with pytest.raises(ValueError):
            RateLimiter(min_interval_ms=-1)


class TestRateLimiterThrottle:
    """Tests for throttle spacing and counting."""

    def setup_method(self) -> None:
        self.clock = FakeClock()
        self.limiter = RateLimiter(min_interval_ms=100, clock=self.clock, sleep=self.clock.sleep)

    @pytest.mark.asyncio
    async def test_first_call_does_not_wait(self) -> None:
        await self.limiter.throttle()
        assert self.clock.sleeps == []
        assert self.limiter.total_requests == 1

    @pytest.mark.asyncio
    async def test_consecutive_calls_are_spaced(self) -> None:
        start = self.clock()
        for _ in range(5):
            await self.limiter.throttle()

        assert self.clock() - start >= 0.4 - 1e-9
        assert self.limiter.total_requests == 5

    @pytest.mark.asyncio
    async def test_no_wait_when_spacing_already_elapsed(self) -> None:
        await self.limiter.throttle()
        self.clock.advance(0.5)
        await self.limiter.throttle()
        assert self.clock.sleeps == []

    @pytest.mark.asyncio
    async def test_waits_only_remaining_time(self) -> None:
        await self.limiter.throttle()
        self.clock.advance(0.03)
        await self.limiter.throttle()
        assert self.clock.sleeps[0] == pytest.approx(0.07)
        assert sum(self.clock.sleeps) == pytest.approx(0.07)

    @pytest.mark.asyncio
    async def test_concurrent_callers_observe_spacing(self) -> None:
        releases: list[float] = []

        async def call() -> None:
            await self.limiter.throttle()
            releases.append(self.clock())

        await asyncio.gather(*(call() for _ in range(4)))

        releases.sort()
        gaps = [later - earlier for earlier, later in zip(releases, releases[1:])]
        assert len(gaps) == 3
        assert all(gap >= 0.1 - 1e-9 for gap in gaps)
        assert self.limiter.total_requests == 4

    @pytest.mark.asyncio
    async def test_real_clock_spacing(self) -> None:
        limiter = RateLimiter(min_interval_ms=20)
        start = time.monotonic()
        for _ in range(4):
            await limiter.throttle()
        elapsed = time.monotonic() - start

        assert elapsed >= 3 * 0.020
        assert limiter.total_requests == 4


class TestRateLimiterUsageStats:
    """Tests for usage and cost reporting."""

    def setup_method(self) -> None:
        self.clock = FakeClock()
        self.limiter = RateLimiter(min_interval_ms=0, clock=self.clock, sleep=self.clock.sleep)

    def test_empty_stats(self) -> None:
        stats = self.limiter.usage_stats()
        assert stats.total_requests == 0
        assert stats.requests_per_minute == 0
        assert stats.estimated_cost == 0

    @pytest.mark.asyncio
    async def test_cost_per_request(self) -> None:
        for _ in range(3):
            await self.limiter.throttle()

        stats = self.limiter.usage_stats()
        assert stats.total_requests == 3
        assert stats.estimated_cost == pytest.approx(3 * (0.032 + 0.017 + 0.007))

    @pytest.mark.asyncio
    async def test_requests_per_minute_window(self) -> None:
        await self.limiter.throttle()
        self.clock.advance(30)
        await self.limiter.throttle()
        assert self.limiter.usage_stats().requests_per_minute == 2

        self.clock.advance(31)
        stats = self.limiter.usage_stats()
        assert stats.requests_per_minute == 1
        # The lifetime counter never drops
        assert stats.total_requests == 2

    @pytest.mark.asyncio
    async def test_to_dict(self) -> None:
        await self.limiter.throttle()
        assert set(self.limiter.usage_stats().to_dict()) == {
            "total_requests",
            "requests_per_minute",
            "estimated_cost",
        }
