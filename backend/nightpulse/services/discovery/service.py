"""Cached nightlife discovery.

Front door for callers (the API): caches whole aggregated venue lists,
decides when a client should refresh, reports provider usage and runs
cache maintenance.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Iterable

from nightpulse.models import Coordinates, InvalidArgumentError, Venue
from nightpulse.services.aggregator import (
    AggregationResult,
    InvalidArgument,
    Ok,
    VenueAggregator,
    parse_center,
    sort_venues,
)
from nightpulse.services.rate_limiter import RateLimiter
from nightpulse.utils.cache import TTLCache
from nightpulse.utils.geo import distance_between

logger = logging.getLogger(__name__)


PEAK_REFRESH_HOURS = 0.5
OFF_PEAK_REFRESH_HOURS = 2.0


def is_peak_time(hour: int) -> bool:
    """Evening peak: 18:00 through 02:59."""
    return hour >= 18 or hour <= 2


def with_distances(venues: Iterable[Venue], reference: Coordinates) -> list[Venue]:
    """Copies of ``venues`` with ``distance_km`` measured from ``reference``."""
    return [
        venue.model_copy(
            update={"distance_km": round(distance_between(reference, venue.coordinates), 2)}
        )
        for venue in venues
    ]


class NightlifeDiscoveryService:
    """Caches aggregated venue lists on top of ``VenueAggregator``."""

    def __init__(
        self,
        aggregator: VenueAggregator,
        result_cache: TTLCache,
        rate_limiter: RateLimiter,
        provider_cache: TTLCache | None = None,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._aggregator = aggregator
        self._result_cache = result_cache
        self._provider_cache = provider_cache
        self._rate_limiter = rate_limiter
        self._now = now

    @staticmethod
    def build_cache_key(center: Coordinates, radius_km: float, city: str | None) -> str:
        return f"venues:{center.lat}:{center.lng}:{radius_km}:{city}"

    async def discover(
        self,
        center: Any,
        radius_km: float = 15,
        city: str | None = None,
    ) -> AggregationResult:
        """Aggregate with result caching; the tagged result is returned as is.

        Only provider-backed (``Ok``) results are cached, so a transient
        outage does not pin mock data for a whole TTL.
        """
        try:
            location = parse_center(center)
        except InvalidArgumentError:
            return await self._aggregator.aggregate(center, radius_km, city)

        cache_key = self.build_cache_key(location, radius_km, city)
        cached = self._result_cache.get(cache_key)
        if cached is not None:
            logger.info("[CACHE] Using cached venue data")
            return Ok(venues=list(cached))

        logger.info("[DISCOVERY] Fetching fresh venue data")
        result = await self._aggregator.aggregate(location, radius_km, city)
        if isinstance(result, Ok):
            self._result_cache.set(cache_key, tuple(result.venues))
        return result

    async def get_cached_nightlife_venues(
        self,
        center: Any,
        radius_km: float = 15,
        city: str | None = None,
    ) -> list[Venue]:
        """Sorted venues for the area.

        Raises:
            InvalidArgumentError: If ``center`` or ``radius_km`` is invalid.
        """
        result = await self.discover(center, radius_km, city)
        if isinstance(result, InvalidArgument):
            raise InvalidArgumentError(result.message, field=result.field)
        return sort_venues(result.venues)

    def should_refresh_data(self, last_update: datetime, now: datetime | None = None) -> bool:
        """Whether data fetched at ``last_update`` is stale.

        Every 30 minutes during the evening peak, every 2 hours otherwise.
        """
        now = now or self._now()
        hours_since_update = (now - last_update).total_seconds() / 3600

        if is_peak_time(now.hour):
            return hours_since_update >= PEAK_REFRESH_HOURS
        return hours_since_update >= OFF_PEAK_REFRESH_HOURS

    def get_api_stats(self) -> dict:
        stats = self._rate_limiter.usage_stats().to_dict()
        stats["result_cache"] = self._result_cache.stats()
        if self._provider_cache is not None:
            stats["provider_cache"] = self._provider_cache.stats()
        return stats

    def perform_maintenance(self) -> None:
        """Drop expired entries from every cache."""
        self._result_cache.sweep_expired()
        if self._provider_cache is not None:
            self._provider_cache.sweep_expired()
        logger.info("[DISCOVERY] Expired cache entries swept")
