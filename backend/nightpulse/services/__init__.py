"""NightPulse Services.

Service layer components:
- Places: Google Places web service client behind a provider interface
- Rate Limiter: minimum spacing between provider calls, usage and cost stats
- Normalizer: raw provider records to canonical venues
- Nightlife: keyword and night-time busyness filters
- Aggregator: multi-type search, dedup and mock-data fallback
- Discovery: cached aggregation, refresh policy and maintenance
"""

from .places import (
    GooglePlacesService,
    PlacesProvider,
    ProviderConfigError,
    ProviderError,
    ProviderResponseError,
)
from .rate_limiter import RateLimiter, UsageStats
from .normalizer import VenueNormalizer
from .nightlife import NightlifeFilter
from .aggregator import (
    AggregationResult,
    Fallback,
    FallbackReason,
    InvalidArgument,
    Ok,
    VenueAggregator,
    sort_venues,
)
from .discovery import NightlifeDiscoveryService, with_distances

__all__ = [
    # Places
    "GooglePlacesService",
    "PlacesProvider",
    "ProviderConfigError",
    "ProviderError",
    "ProviderResponseError",
    # Rate limiting
    "RateLimiter",
    "UsageStats",
    # Normalization and filtering
    "VenueNormalizer",
    "NightlifeFilter",
    # Aggregation
    "AggregationResult",
    "Fallback",
    "FallbackReason",
    "InvalidArgument",
    "Ok",
    "VenueAggregator",
    "sort_venues",
    # Discovery
    "NightlifeDiscoveryService",
    "with_distances",
]
