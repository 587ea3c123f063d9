"""Venue aggregator module.

Queries the places provider per venue type, normalizes and dedups the
results, and falls back to fixed mock venues when the provider fails.
"""

from .mock_data import DEFAULT_MOCK_CITY, MOCK_VENUES, get_mock_venues, resolve_mock_city
from .service import (
    AggregationResult,
    Fallback,
    FallbackReason,
    InvalidArgument,
    Ok,
    VenueAggregator,
    dedupe_venues,
    gather_all,
    parse_center,
    sort_venues,
    validate_radius,
)

__all__ = [
    "AggregationResult",
    "DEFAULT_MOCK_CITY",
    "Fallback",
    "FallbackReason",
    "InvalidArgument",
    "MOCK_VENUES",
    "Ok",
    "VenueAggregator",
    "dedupe_venues",
    "gather_all",
    "get_mock_venues",
    "parse_center",
    "resolve_mock_city",
    "sort_venues",
    "validate_radius",
]
