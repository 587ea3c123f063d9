"""Core data models for NightPulse.

This module contains the Pydantic models used throughout the application
for representing coordinates, canonical venues and busyness telemetry.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VenueCategory(str, Enum):
    """Venue categories inferred from provider names and type tags."""

    BAR = "bar"
    CLUB = "club"
    HOOKAH = "hookah"


class PriceTier(str, Enum):
    """Display price tier mapped from the provider's price level."""

    BUDGET = "$"
    MODERATE = "$$"
    UPSCALE = "$$$"


class BusynessLevel(str, Enum):
    """Heuristic busyness bands.

    Derived from rating and review volume, not live occupancy sensing.
    """

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very-high"


class Coordinates(BaseModel):
    """Geographic coordinates with validation.

    Latitude must be between -90 and 90 degrees.
    Longitude must be between -180 and 180 degrees.
    NaN and infinity are rejected.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in degrees")


class VenueReview(BaseModel):
    """A provider review kept alongside the venue."""

    model_config = ConfigDict(frozen=True)

    author_name: str = ""
    rating: float = Field(0.0, ge=0, le=5)
    text: str = ""


class Venue(BaseModel):
    """Canonical nightlife venue.

    Rebuilt from provider data on every aggregation call and immutable
    afterwards. ``provider_id`` is the identity used for deduplication;
    ``id`` mirrors it.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Venue identifier")
    provider_id: str = Field(..., min_length=1, description="Provider place identifier")
    name: str = Field(..., description="Display name")
    category: VenueCategory = Field(..., description="Inferred venue category")
    coordinates: Coordinates = Field(..., description="Geographic location")
    address: str = Field("", description="Formatted address")
    phone: str = Field("", description="Display phone number")
    rating: float = Field(4.0, ge=0, le=5, description="Average rating (0-5)")
    rating_count: Optional[int] = Field(None, ge=0, description="Number of ratings")
    price_tier: PriceTier = Field(PriceTier.MODERATE, description="Price tier")
    is_open_now: bool = Field(True, description="Best-effort open-now flag")
    busyness_level: BusynessLevel = Field(..., description="Heuristic busyness band")
    busyness_score: int = Field(..., ge=0, le=100, description="Heuristic busyness score")
    peak_hours: list[str] = Field(default_factory=list, description="Peak hours, HH:MM")
    features: list[str] = Field(
        default_factory=list, max_length=4, description="Short feature tags"
    )
    image_url: str = Field("", description="Photo URL")
    website: Optional[str] = Field(None, description="Venue website")
    reviews: list[VenueReview] = Field(
        default_factory=list, max_length=3, description="First provider reviews"
    )
    distance_km: Optional[float] = Field(
        None, ge=0, description="Distance from the caller's reference point"
    )


class HourlyBusyness(BaseModel):
    """Predicted busyness for one hour of the day."""

    hour: int = Field(..., ge=0, le=23)
    busyness: int = Field(..., ge=0, le=100)


class BusynessData(BaseModel):
    """Busyness telemetry for a single venue."""

    venue_id: str = Field(..., min_length=1)
    current_busyness: int = Field(..., ge=0, le=100, description="Current busyness (0-100)")
    predicted_busyness: list[HourlyBusyness] = Field(default_factory=list)
    is_nightlife_peak: bool = Field(
        False, description="Whether the venue is busiest between 22:00 and 08:00"
    )
    peak_night_hours: list[int] = Field(default_factory=list)
