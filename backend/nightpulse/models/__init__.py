"""NightPulse data models."""

from .core import (
    BusynessData,
    BusynessLevel,
    Coordinates,
    HourlyBusyness,
    PriceTier,
    Venue,
    VenueCategory,
    VenueReview,
)
from .errors import AppError, ErrorCode, InvalidArgumentError

__all__ = [
    "AppError",
    "BusynessData",
    "BusynessLevel",
    "Coordinates",
    "ErrorCode",
    "HourlyBusyness",
    "InvalidArgumentError",
    "PriceTier",
    "Venue",
    "VenueCategory",
    "VenueReview",
]
