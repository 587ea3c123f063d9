"""Venue normalizer module."""

from .service import (
    CATEGORY_FEATURES,
    FALLBACK_IMAGES,
    VenueNormalizer,
    busyness_level_for,
    busyness_score_for,
    categorize_venue,
    generate_features,
    price_tier_for,
)

__all__ = [
    "CATEGORY_FEATURES",
    "FALLBACK_IMAGES",
    "VenueNormalizer",
    "busyness_level_for",
    "busyness_score_for",
    "categorize_venue",
    "generate_features",
    "price_tier_for",
]
