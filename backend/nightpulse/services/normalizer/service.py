"""Converts raw provider records into canonical ``Venue`` models.

The provider only knows generic place types, so nightlife-specific fields
are inferred:

- category from name and type tags (hookah > club > bar)
- price tier from the provider's 0-4 price level
- busyness level and score from rating and review volume
- feature tags seeded per category plus provider-derived bonuses

Busyness is a popularity heuristic, not live occupancy. The level bands
and the numeric score use two independent formulas and are kept as such.
"""

import logging
import math
import random
from typing import Any, Optional

from pydantic import ValidationError

from nightpulse.models import (
    BusynessLevel,
    Coordinates,
    PriceTier,
    Venue,
    VenueCategory,
    VenueReview,
)
from nightpulse.services.places import build_photo_proxy_url

logger = logging.getLogger(__name__)


DEFAULT_RATING = 4.0
PLACEHOLDER_PHONE = "(555) 000-0000"
PHOTO_MAX_WIDTH = 600
MAX_FEATURES = 4
MAX_REVIEWS = 3

DEFAULT_PEAK_HOURS = ("21:00", "22:00", "23:00", "00:00", "01:00")

FALLBACK_IMAGES = (
    "https://images.pexels.com/photos/1449773/pexels-photo-1449773.jpeg",
    "https://images.pexels.com/photos/274192/pexels-photo-274192.jpeg",
    "https://images.pexels.com/photos/3184292/pexels-photo-3184292.jpeg",
)

CATEGORY_FEATURES = {
    VenueCategory.BAR: ("Drinks", "Happy Hour", "Music"),
    VenueCategory.CLUB: ("Dance Floor", "DJ", "VIP Area"),
    VenueCategory.HOOKAH: ("Hookah", "Lounge", "BYOB"),
}

HOOKAH_TERMS = ("hookah", "shisha")
CLUB_TERMS = ("club", "nightclub", "dance")

PRICE_TIERS = {
    1: PriceTier.BUDGET,
    2: PriceTier.MODERATE,
    3: PriceTier.UPSCALE,
    4: PriceTier.UPSCALE,
}


def categorize_venue(name: str | None, types: list[str] | None) -> VenueCategory:
    """Infer the venue category from its name and provider type tags."""
    text = f"{(name or '').lower()} {' '.join(types or []).lower()}"

    if any(term in text for term in HOOKAH_TERMS):
        return VenueCategory.HOOKAH
    if any(term in text for term in CLUB_TERMS):
        return VenueCategory.CLUB
    return VenueCategory.BAR


def price_tier_for(price_level: Any) -> PriceTier:
    """Map a provider price level (0-4) to a display tier; ``$$`` when unknown."""
    if isinstance(price_level, bool) or not isinstance(price_level, (int, float)):
        return PriceTier.MODERATE
    if not math.isfinite(price_level):
        return PriceTier.MODERATE
    return PRICE_TIERS.get(int(price_level), PriceTier.MODERATE)


def busyness_level_for(rating: float, review_count: int) -> BusynessLevel:
    """Band a venue by a 70/30 blend of rating and capped review volume.

    ``score = rating * 0.7 + min(reviews / 100, 5) * 0.3``, computed in
    tenths so the 4.5 / 4.0 / 3.5 boundaries compare exactly.
    """
    score = (rating * 7 + min(review_count / 100, 5) * 3) / 10

    if score >= 4.5:
        return BusynessLevel.VERY_HIGH
    if score >= 4.0:
        return BusynessLevel.HIGH
    if score >= 3.5:
        return BusynessLevel.MODERATE
    return BusynessLevel.LOW


def busyness_score_for(rating: float, review_count: int) -> int:
    """0-100 score: up to 60 points from rating, up to 40 from review volume."""
    score = (rating / 5) * 60
    score += min(review_count / 50, 40)
    score = max(0.0, min(score, 100.0))
    # Round half up
    return int(math.floor(score + 0.5))


def generate_features(
    category: VenueCategory,
    has_website: bool,
    review_count: int,
    price_level: Any,
) -> list[str]:
    features = list(CATEGORY_FEATURES[category])

    if has_website:
        features.append("Online Presence")
    if review_count > 100:
        features.append("Popular")
    price = _as_number(price_level)
    if price is not None and price >= 3:
        features.append("Upscale")

    return features[:MAX_FEATURES]


def _first(*values: Any) -> Any:
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _truthy_first(*values: Any) -> Any:
    """First truthy value, so zeros and empty strings fall through."""
    for value in values:
        if value:
            return value
    return None


def _as_number(value: Any) -> Optional[float]:
    """Finite float, or None for anything else (NaN and infinity included)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _extract_location(record: dict) -> Optional[tuple[Any, Any]]:
    geometry = record.get("geometry")
    if not isinstance(geometry, dict):
        return None
    location = geometry.get("location")
    if not isinstance(location, dict):
        return None
    return location.get("lat"), location.get("lng")


class VenueNormalizer:
    """Builds ``Venue`` models from a provider summary plus its detail record.

    Detail fields take precedence; the search summary fills the gaps.
    """

    def __init__(
        self,
        photo_base_url: str = "",
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the normalizer.

        Args:
            photo_base_url: Base URL of the photo endpoint; empty for relative URLs.
            rng: Random source for the fallback image rotation. Seed it for
                deterministic output.
        """
        self._photo_base_url = photo_base_url
        self._rng = rng or random.Random()

    def normalize(self, summary: dict, detail: dict | None) -> Venue | None:
        """Convert one provider record into a ``Venue``.

        Returns:
            The venue, or None when the record has no usable identity or
            geometry and should be dropped.
        """
        detail = detail or {}

        place_id = _truthy_first(summary.get("place_id"), detail.get("place_id"))
        if not isinstance(place_id, str):
            logger.info("[NORMALIZE] Dropping record without place_id")
            return None

        coordinates = self._coordinates(summary, detail)
        if coordinates is None:
            logger.info(f"[NORMALIZE] Dropping {place_id}: missing or malformed geometry")
            return None

        name = _truthy_first(detail.get("name"), summary.get("name")) or ""
        types = _first(detail.get("types"), summary.get("types"))
        if not isinstance(types, list):
            types = []
        category = categorize_venue(name, [str(t) for t in types])

        rating = _as_number(_truthy_first(detail.get("rating"), summary.get("rating")))
        rating = DEFAULT_RATING if rating is None else max(0.0, min(rating, 5.0))

        rating_count = _as_number(
            _first(detail.get("user_ratings_total"), summary.get("user_ratings_total"))
        )
        rating_count = None if rating_count is None or rating_count < 0 else int(rating_count)
        review_count = rating_count or 0

        price_level = _first(detail.get("price_level"), summary.get("price_level"))
        website = detail.get("website") or None

        try:
            return Venue(
                id=place_id,
                provider_id=place_id,
                name=name,
                category=category,
                coordinates=coordinates,
                address=_truthy_first(
                    detail.get("formatted_address"),
                    summary.get("formatted_address"),
                    summary.get("vicinity"),
                )
                or "",
                phone=_truthy_first(
                    detail.get("formatted_phone_number"),
                    detail.get("international_phone_number"),
                )
                or PLACEHOLDER_PHONE,
                rating=rating,
                rating_count=rating_count,
                price_tier=price_tier_for(price_level),
                is_open_now=self._is_open_now(summary, detail),
                busyness_level=busyness_level_for(rating, review_count),
                busyness_score=busyness_score_for(rating, review_count),
                peak_hours=list(DEFAULT_PEAK_HOURS),
                features=generate_features(category, bool(website), review_count, price_level),
                image_url=self.resolve_image(_first(detail.get("photos"), summary.get("photos"))),
                website=website if isinstance(website, str) else None,
                reviews=self._reviews(detail.get("reviews")),
            )
        except ValidationError as e:
            logger.info(f"[NORMALIZE] Dropping {place_id}: {e.error_count()} invalid fields")
            return None

    def _coordinates(self, summary: dict, detail: dict) -> Coordinates | None:
        location = _extract_location(detail) or _extract_location(summary)
        if location is None:
            return None

        lat, lng = (_as_number(v) for v in location)
        if lat is None or lng is None:
            return None

        try:
            return Coordinates(lat=lat, lng=lng)
        except ValidationError:
            return None

    @staticmethod
    def _is_open_now(summary: dict, detail: dict) -> bool:
        for record in (detail, summary):
            hours = record.get("opening_hours")
            if isinstance(hours, dict) and isinstance(hours.get("open_now"), bool):
                return hours["open_now"]
        return True

    @staticmethod
    def _reviews(raw: Any) -> list[VenueReview]:
        if not isinstance(raw, list):
            return []

        reviews = []
        for item in raw[:MAX_REVIEWS]:
            if not isinstance(item, dict):
                continue
            try:
                reviews.append(
                    VenueReview(
                        author_name=str(item.get("author_name") or ""),
                        rating=_as_number(item.get("rating")) or 0.0,
                        text=str(item.get("text") or ""),
                    )
                )
            except ValidationError:
                continue
        return reviews

    def resolve_image(self, photos: Any) -> str:
        """Photo endpoint URL for the first photo, else a fallback image."""
        if isinstance(photos, list) and photos:
            first = photos[0]
            reference = first.get("photo_reference") if isinstance(first, dict) else None
            if reference:
                return build_photo_proxy_url(self._photo_base_url, reference, PHOTO_MAX_WIDTH)

        return self._rng.choice(FALLBACK_IMAGES)
