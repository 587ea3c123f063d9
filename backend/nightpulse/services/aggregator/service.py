"""Nightlife venue aggregation.

Pipeline per call:
1. Validate the query (bad input is reported, never masked by mock data)
2. One provider nearby search per venue type, through the rate limiter
   and the TTL cache
3. One detail fetch per search result, also limited and cached
4. Normalize, dedup by provider id (first occurrence wins), keep nightlife
5. Fall back to the fixed mock set for the city when the provider is not
   configured, every type query failed, nothing survived the filter, or
   anything unexpected was raised

The outcome is a tagged result (``Ok``, ``Fallback`` or
``InvalidArgument``) so callers can tell which path was taken.
"""

import asyncio
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Iterable, Mapping, Sequence, TypeVar, Union

from pydantic import ValidationError

from nightpulse.config import DEFAULT_VENUE_TYPES
from nightpulse.models import Coordinates, InvalidArgumentError, Venue
from nightpulse.services.nightlife import NightlifeFilter
from nightpulse.services.normalizer import VenueNormalizer
from nightpulse.services.places import PlacesProvider, ProviderError
from nightpulse.services.rate_limiter import RateLimiter
from nightpulse.utils.cache import TTLCache

from .mock_data import DEFAULT_MOCK_CITY, get_mock_venues, resolve_mock_city

logger = logging.getLogger(__name__)


T = TypeVar("T")


class FallbackReason(str, Enum):
    """Why mock venues were served instead of provider data."""

    PROVIDER_NOT_CONFIGURED = "provider_not_configured"
    ALL_QUERIES_FAILED = "all_queries_failed"
    NO_NIGHTLIFE_VENUES = "no_nightlife_venues"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass(frozen=True)
class Ok:
    """Venues built from provider data."""

    venues: list[Venue]


@dataclass(frozen=True)
class Fallback:
    """Mock venues served for ``city`` because of ``reason``."""

    reason: FallbackReason
    venues: list[Venue]
    city: str
    detail: str | None = None


@dataclass(frozen=True)
class InvalidArgument:
    """The caller passed an unusable center or radius."""

    message: str
    field: str | None = None


AggregationResult = Union[Ok, Fallback, InvalidArgument]


@dataclass
class _TypeQueryOutcome:
    venue_type: str
    venues: list[Venue] = field(default_factory=list)
    failed: bool = False


def parse_center(center: Any) -> Coordinates:
    """Coerce a ``Coordinates``, ``{"lat", "lng"}`` mapping or ``(lat, lng)`` pair.

    Raises:
        InvalidArgumentError: If the value is not a valid lat/lng.
    """
    if isinstance(center, Coordinates):
        return center

    try:
        if isinstance(center, Mapping):
            return Coordinates(lat=center.get("lat"), lng=center.get("lng"))
        if isinstance(center, Sequence) and not isinstance(center, str) and len(center) == 2:
            return Coordinates(lat=center[0], lng=center[1])
    except ValidationError as e:
        raise InvalidArgumentError(f"Invalid center coordinates: {center!r}", field="center") from e

    raise InvalidArgumentError(f"Invalid center coordinates: {center!r}", field="center")


def validate_radius(radius_km: Any) -> float:
    if isinstance(radius_km, bool) or not isinstance(radius_km, (int, float)):
        raise InvalidArgumentError("radius_km must be a number", field="radius_km")
    if not math.isfinite(radius_km) or radius_km <= 0:
        raise InvalidArgumentError("radius_km must be a positive number", field="radius_km")
    return float(radius_km)


def sort_venues(venues: Iterable[Venue]) -> list[Venue]:
    """Busiest first, then best rated. Stable for full ties."""
    return sorted(venues, key=lambda v: (-v.busyness_score, -v.rating))


def dedupe_venues(venues: Iterable[Venue]) -> list[Venue]:
    """Keep the first venue per provider id."""
    seen: set[str] = set()
    unique = []
    for venue in venues:
        if venue.provider_id in seen:
            continue
        seen.add(venue.provider_id)
        unique.append(venue)
    return unique


async def gather_all(*aws: Awaitable[T]) -> list[T]:
    """``asyncio.gather`` that never leaves siblings running.

    If any awaitable raises, the others are cancelled and awaited before
    the error propagates.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class VenueAggregator:
    """Collects nightlife venues from a places provider.

    The cache and rate limiter are injected so each instance (and each
    test) can have its own.
    """

    def __init__(
        self,
        provider: PlacesProvider,
        cache: TTLCache,
        rate_limiter: RateLimiter,
        normalizer: VenueNormalizer | None = None,
        nightlife_filter: NightlifeFilter | None = None,
        venue_types: Sequence[str] = DEFAULT_VENUE_TYPES,
        query_timeout: float = 15.0,
        default_city: str = DEFAULT_MOCK_CITY,
    ) -> None:
        if not venue_types:
            raise ValueError("At least one venue type is required")
        self._provider = provider
        self._cache = cache
        self._rate_limiter = rate_limiter
        self._normalizer = normalizer or VenueNormalizer()
        self._filter = nightlife_filter or NightlifeFilter()
        self._venue_types = tuple(venue_types)
        self._query_timeout = query_timeout
        self._default_city = default_city

    @property
    def venue_types(self) -> tuple[str, ...]:
        return self._venue_types

    async def get_nightlife_venues(
        self,
        center: Any,
        radius_km: float = 15,
        city_hint: str | None = None,
    ) -> list[Venue]:
        """Venues for the area, provider-backed or mock.

        Raises:
            InvalidArgumentError: If ``center`` or ``radius_km`` is invalid.
        """
        result = await self.aggregate(center, radius_km, city_hint)
        if isinstance(result, InvalidArgument):
            raise InvalidArgumentError(result.message, field=result.field)
        return result.venues

    async def aggregate(
        self,
        center: Any,
        radius_km: float = 15,
        city_hint: str | None = None,
    ) -> AggregationResult:
        """Run one aggregation and report which path produced the venues."""
        try:
            location = parse_center(center)
            radius = validate_radius(radius_km)
        except InvalidArgumentError as e:
            logger.warning(f"[AGGREGATE] Rejected query: {e.message}")
            return InvalidArgument(message=e.message, field=e.field)

        if not self._provider.is_configured:
            logger.warning("[AGGREGATE] Places API key not configured, using mock data")
            return self._fallback(FallbackReason.PROVIDER_NOT_CONFIGURED, city_hint)

        logger.info(
            f"[AGGREGATE] Fetching venues near ({location.lat:.4f}, {location.lng:.4f}), "
            f"radius {radius}km, city {city_hint}"
        )

        try:
            radius_meters = int(round(radius * 1000))
            outcomes = await gather_all(
                *(self._run_type_query(location, radius_meters, t) for t in self._venue_types)
            )

            if all(outcome.failed for outcome in outcomes):
                return self._fallback(
                    FallbackReason.ALL_QUERIES_FAILED,
                    city_hint,
                    detail=f"{len(outcomes)} of {len(outcomes)} type queries failed",
                )

            collected = [venue for outcome in outcomes for venue in outcome.venues]
            unique = dedupe_venues(collected)
            nightlife = self._filter.filter_venues(unique)

            logger.info(
                f"[AGGREGATE] {len(collected)} venues, {len(unique)} unique, {len(nightlife)} nightlife"
            )

            if not nightlife:
                return self._fallback(FallbackReason.NO_NIGHTLIFE_VENUES, city_hint)
            return Ok(venues=nightlife)

        except Exception as e:
            logger.exception("[AGGREGATE] Unexpected error, using mock data")
            return self._fallback(FallbackReason.UNEXPECTED_ERROR, city_hint, detail=str(e))

    def _fallback(
        self, reason: FallbackReason, city_hint: str | None, detail: str | None = None
    ) -> Fallback:
        city = resolve_mock_city(city_hint, self._default_city)
        logger.warning(f"[AGGREGATE] Falling back to mock venues for {city} ({reason.value})")
        return Fallback(
            reason=reason,
            venues=get_mock_venues(city_hint, self._default_city),
            city=city,
            detail=detail,
        )

    async def _run_type_query(
        self, location: Coordinates, radius_meters: int, venue_type: str
    ) -> _TypeQueryOutcome:
        """Search one venue type and normalize its results.

        Any failure or timeout empties this query's contribution and marks
        it failed; it never aborts the whole aggregation.
        """
        try:
            venues = await asyncio.wait_for(
                self._collect_type(location, radius_meters, venue_type),
                timeout=self._query_timeout,
            )
            return _TypeQueryOutcome(venue_type=venue_type, venues=venues)
        except asyncio.TimeoutError:
            logger.warning(f"[AGGREGATE] {venue_type} query timed out after {self._query_timeout}s")
        except ProviderError as e:
            logger.warning(f"[AGGREGATE] {venue_type} query failed: {e}")
        except Exception:
            logger.exception(f"[AGGREGATE] {venue_type} query raised unexpectedly")
        return _TypeQueryOutcome(venue_type=venue_type, failed=True)

    async def _collect_type(
        self, location: Coordinates, radius_meters: int, venue_type: str
    ) -> list[Venue]:
        summaries = await self._search(location, radius_meters, venue_type)
        if not summaries:
            logger.info(f"[AGGREGATE] No {venue_type} venues found")
            return []

        summaries = [s for s in summaries if isinstance(s, dict)]
        details = await gather_all(*(self._details_for(s) for s in summaries))

        venues = []
        for summary, detail in zip(summaries, details):
            if detail is None:
                continue
            venue = self._normalizer.normalize(summary, detail)
            if venue is not None:
                venues.append(venue)
        return venues

    async def _search(
        self, location: Coordinates, radius_meters: int, venue_type: str
    ) -> list[dict]:
        key = f"search:{location.lat}:{location.lng}:{radius_meters}:{venue_type}"
        cached = self._cache.get(key)
        if cached is not None:
            logger.info(f"[CACHE] Hit for {venue_type} search")
            return cached

        await self._rate_limiter.throttle()
        results = await self._provider.search_nearby(location, radius_meters, venue_type)
        self._cache.set(key, results)
        return results

    async def _details_for(self, summary: dict) -> dict | None:
        """Detail record for one summary, or None to drop that venue."""
        place_id = summary.get("place_id")
        if not isinstance(place_id, str) or not place_id:
            return None

        key = f"details:{place_id}"
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        try:
            await self._rate_limiter.throttle()
            detail = await self._provider.get_details(place_id)
        except Exception as e:
            logger.info(f"[AGGREGATE] Skipping {place_id}: {e}")
            return None

        self._cache.set(key, detail)
        return detail
