"""API routes for NightPulse.

- POST /venues/nightlife: aggregated nightlife venues, sorted busiest first
- GET /venues/photo: redirect to the provider photo for a photo reference
- GET /venues/stats: provider usage, estimated cost and cache statistics
- POST /venues/maintenance: sweep expired cache entries
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field

from nightpulse.config import get_settings
from nightpulse.models import AppError, Coordinates, ErrorCode, Venue
from nightpulse.services import (
    Fallback,
    GooglePlacesService,
    InvalidArgument,
    NightlifeDiscoveryService,
    NightlifeFilter,
    PlacesProvider,
    RateLimiter,
    VenueAggregator,
    VenueNormalizer,
    sort_venues,
    with_distances,
)
from nightpulse.utils.cache import TTLCache

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response models
class NightlifeVenuesRequest(BaseModel):
    """Request model for a nightlife venue search."""
    location: dict = Field(..., description='{"lat": float, "lng": float}')
    # Falls back to NIGHTPULSE_DEFAULT_RADIUS_KM
    radius_km: Optional[float] = None
    city: Optional[str] = None
    # Optional point to measure venue distances from (usually the user)
    reference: Optional[Coordinates] = None


class NightlifeVenuesResponse(BaseModel):
    """Response model for a nightlife venue search."""
    success: bool
    venues: list[Venue] = Field(default_factory=list)
    source: Optional[str] = None  # "provider" or "fallback"
    fallback_reason: Optional[str] = None
    error: Optional[AppError] = None


class MaintenanceResponse(BaseModel):
    success: bool
    stats: dict


# Service instances
_provider: PlacesProvider | None = None
_discovery_service: NightlifeDiscoveryService | None = None


def get_provider() -> PlacesProvider:
    global _provider
    if _provider is None:
        settings = get_settings()
        _provider = GooglePlacesService(
            api_key=settings.google_maps_api_key,
            timeout=settings.provider_timeout_seconds,
        )
    return _provider


def get_discovery_service() -> NightlifeDiscoveryService:
    global _discovery_service
    if _discovery_service is None:
        settings = get_settings()
        provider_cache = TTLCache(ttl_seconds=settings.cache_ttl_seconds)
        rate_limiter = RateLimiter(min_interval_ms=settings.request_spacing_ms)
        aggregator = VenueAggregator(
            provider=get_provider(),
            cache=provider_cache,
            rate_limiter=rate_limiter,
            normalizer=VenueNormalizer(photo_base_url=settings.public_base_url),
            nightlife_filter=NightlifeFilter(),
            venue_types=settings.venue_types,
            query_timeout=settings.query_timeout_seconds,
            default_city=settings.default_city,
        )
        _discovery_service = NightlifeDiscoveryService(
            aggregator=aggregator,
            result_cache=TTLCache(ttl_seconds=settings.cache_ttl_seconds),
            rate_limiter=rate_limiter,
            provider_cache=provider_cache,
        )
    return _discovery_service


def set_services(
    discovery_service: NightlifeDiscoveryService | None,
    provider: PlacesProvider | None = None,
) -> None:
    """Replace the process-wide services (used by tests and app startup)."""
    global _discovery_service, _provider
    _discovery_service = discovery_service
    _provider = provider


async def shutdown_services() -> None:
    if _provider is not None:
        await _provider.close()
    set_services(None, None)


@router.post("/venues/nightlife", response_model=NightlifeVenuesResponse)
async def get_nightlife_venues(request: NightlifeVenuesRequest) -> NightlifeVenuesResponse:
    """Nightlife venues around a location.

    Falls back to fixed mock venues when the provider is unavailable; the
    response says which source was used.
    """
    try:
        service = get_discovery_service()
        radius_km = request.radius_km
        if radius_km is None:
            radius_km = get_settings().default_radius_km
        result = await service.discover(request.location, radius_km, request.city)

        if isinstance(result, InvalidArgument):
            return NightlifeVenuesResponse(
                success=False,
                error=AppError(
                    code=ErrorCode.INVALID_INPUT,
                    message=result.message,
                    user_message="Invalid location or radius. Please check your input.",
                    field=result.field,
                ),
            )

        venues = sort_venues(result.venues)
        if request.reference is not None:
            venues = with_distances(venues, request.reference)

        if isinstance(result, Fallback):
            return NightlifeVenuesResponse(
                success=True,
                venues=venues,
                source="fallback",
                fallback_reason=result.reason.value,
            )
        return NightlifeVenuesResponse(success=True, venues=venues, source="provider")

    except Exception as e:
        logger.exception("Unhandled error")
        return NightlifeVenuesResponse(
            success=False,
            error=AppError(
                code=ErrorCode.API_ERROR,
                message=str(e),
                user_message="Something went wrong. Please try again later.",
            ),
        )


@router.get("/venues/photo")
async def get_venue_photo(
    photo_reference: str = Query(..., alias="photoReference", min_length=1),
    max_width: int = Query(400, alias="maxWidth", ge=1, le=1600),
) -> RedirectResponse:
    """Redirect to the provider's photo for ``photoReference``."""
    return RedirectResponse(get_provider().photo_url(photo_reference, max_width))


@router.get("/venues/stats")
async def get_usage_stats() -> dict:
    return get_discovery_service().get_api_stats()


@router.post("/venues/maintenance", response_model=MaintenanceResponse)
async def run_maintenance() -> MaintenanceResponse:
    service = get_discovery_service()
    service.perform_maintenance()
    return MaintenanceResponse(success=True, stats=service.get_api_stats())
