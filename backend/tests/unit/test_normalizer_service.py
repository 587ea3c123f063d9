"""Unit tests for the venue normalizer.

Covers category inference, price tiers, both busyness formulas, feature
tags, image resolution and the handling of incomplete provider records.
"""

import random

import pytest

from nightpulse.models import BusynessLevel, PriceTier, VenueCategory
from nightpulse.services.normalizer import (
    FALLBACK_IMAGES,
    VenueNormalizer,
    busyness_level_for,
    busyness_score_for,
    categorize_venue,
    generate_features,
    price_tier_for,
)
from tests.unit.fakes import make_place


class TestCategorizeVenue:
    """Tests for category inference from names and type tags."""

    def test_hookah_from_name(self) -> None:
        assert categorize_venue("Cloud Nine Hookah", ["bar"]) == VenueCategory.HOOKAH

    def test_shisha_beats_club(self) -> None:
        assert categorize_venue("Shisha Club", []) == VenueCategory.HOOKAH

    def test_club_from_type_tag(self) -> None:
        assert categorize_venue("Stereo Live", ["night_club", "point_of_interest"]) == VenueCategory.CLUB

    def test_dance_means_club(self) -> None:
        assert categorize_venue("Salsa Dance Hall", None) == VenueCategory.CLUB

    def test_defaults_to_bar(self) -> None:
        assert categorize_venue("The Pint", ["bar", "restaurant"]) == VenueCategory.BAR
        assert categorize_venue(None, None) == VenueCategory.BAR

    def test_case_insensitive(self) -> None:
        assert categorize_venue("HOOKAH HEAVEN", []) == VenueCategory.HOOKAH


class TestPriceTier:
    """Tests for provider price level mapping."""

    @pytest.mark.parametrize(
        "level, tier",
        [
            (1, PriceTier.BUDGET),
            (2, PriceTier.MODERATE),
            (3, PriceTier.UPSCALE),
            (4, PriceTier.UPSCALE),
            (0, PriceTier.MODERATE),
            (None, PriceTier.MODERATE),
            (7, PriceTier.MODERATE),
            ("3", PriceTier.MODERATE),
            (float("nan"), PriceTier.MODERATE),
        ],
    )
    def test_mapping(self, level, tier) -> None:
        assert price_tier_for(level) == tier


class TestBusynessLevel:
    """Tests for the level bands at and around each threshold."""

    def test_exactly_very_high(self) -> None:
        # 4.5 * 0.7 + 4.5 * 0.3 == 4.5
        assert busyness_level_for(4.5, 450) == BusynessLevel.VERY_HIGH

    def test_just_below_very_high(self) -> None:
        # 4.5 * 0.7 + 4.4 * 0.3 == 4.47
        assert busyness_level_for(4.5, 440) == BusynessLevel.HIGH

    def test_exactly_high(self) -> None:
        # 4.0 * 0.7 + 4.0 * 0.3 == 4.0
        assert busyness_level_for(4.0, 400) == BusynessLevel.HIGH

    def test_just_below_high(self) -> None:
        # 4.0 * 0.7 + 3.9 * 0.3 == 3.97
        assert busyness_level_for(4.0, 390) == BusynessLevel.MODERATE

    def test_exactly_moderate(self) -> None:
        # 5.0 * 0.7 + 0 == 3.5
        assert busyness_level_for(5.0, 0) == BusynessLevel.MODERATE

    def test_just_below_moderate(self) -> None:
        # 4.9 * 0.7 == 3.43
        assert busyness_level_for(4.9, 0) == BusynessLevel.LOW

    def test_review_bonus_is_capped(self) -> None:
        # min(10000 / 100, 5) * 0.3 == 1.5, so 4.0 * 0.7 + 1.5 == 4.3
        assert busyness_level_for(4.0, 10_000) == BusynessLevel.HIGH
        assert busyness_level_for(4.0, 500) == busyness_level_for(4.0, 10_000)


class TestBusynessScore:
    """Tests for the numeric busyness score."""

    @pytest.mark.parametrize(
        "rating, reviews, expected",
        [
            (0.0, 0, 0),
            (4.0, 0, 48),
            (4.5, 250, 59),
            (4.2, 180, 54),
            (5.0, 2000, 100),
            (5.0, 1_000_000, 100),
        ],
    )
    def test_known_values(self, rating: float, reviews: int, expected: int) -> None:
        assert busyness_score_for(rating, reviews) == expected

    def test_rounds_half_up(self) -> None:
        # 0 + 25 / 50 == 0.5
        assert busyness_score_for(0.0, 25) == 1

    @pytest.mark.parametrize("reviews", [0, 30, 120, 999, 5000])
    def test_monotonic_in_rating(self, reviews: int) -> None:
        ratings = [r / 10 for r in range(0, 51)]
        scores = [busyness_score_for(r, reviews) for r in ratings]
        assert scores == sorted(scores)

    def test_always_in_range(self) -> None:
        for rating in (0.0, 2.5, 5.0):
            for reviews in (0, 10, 10_000):
                assert 0 <= busyness_score_for(rating, reviews) <= 100


class TestGenerateFeatures:
    """Tests for feature tagging."""

    def test_category_seed_only(self) -> None:
        assert generate_features(VenueCategory.CLUB, False, 10, None) == [
            "Dance Floor",
            "DJ",
            "VIP Area",
        ]

    def test_truncated_to_four_in_insertion_order(self) -> None:
        assert generate_features(VenueCategory.BAR, True, 150, 3) == [
            "Drinks",
            "Happy Hour",
            "Music",
            "Online Presence",
        ]

    def test_upscale_bonus(self) -> None:
        assert generate_features(VenueCategory.HOOKAH, False, 50, 4) == [
            "Hookah",
            "Lounge",
            "BYOB",
            "Upscale",
        ]

    def test_popular_needs_more_than_one_hundred_reviews(self) -> None:
        assert "Popular" not in generate_features(VenueCategory.BAR, False, 100, None)
        assert "Popular" in generate_features(VenueCategory.BAR, False, 101, None)


class TestVenueNormalizer:
    """Tests for VenueNormalizer.normalize."""

    def setup_method(self) -> None:
        self.normalizer = VenueNormalizer(
            photo_base_url="https://api.example.com", rng=random.Random(7)
        )

    def test_full_record(self) -> None:
        summary = make_place("p1", "Stereo", vicinity="1 Elm St")
        detail = make_place(
            "p1",
            "Stereo Nightclub",
            lat=32.7842,
            lng=-96.7839,
            formatted_address="2600 Main St, Dallas, TX",
            formatted_phone_number="(214) 555-0100",
            rating=4.6,
            user_ratings_total=320,
            price_level=3,
            types=["night_club", "bar"],
            opening_hours={"open_now": False},
            website="https://stereo.example.com",
            photos=[{"photo_reference": "ref123"}, {"photo_reference": "ref456"}],
            reviews=[{"author_name": f"user{i}", "rating": 5, "text": "great"} for i in range(5)],
        )

        venue = self.normalizer.normalize(summary, detail)

        assert venue is not None
        assert venue.id == "p1"
        assert venue.provider_id == "p1"
        assert venue.name == "Stereo Nightclub"
        assert venue.category == VenueCategory.CLUB
        assert venue.coordinates.lat == 32.7842
        assert venue.coordinates.lng == -96.7839
        assert venue.address == "2600 Main St, Dallas, TX"
        assert venue.phone == "(214) 555-0100"
        assert venue.rating == 4.6
        assert venue.rating_count == 320
        assert venue.price_tier == PriceTier.UPSCALE
        assert venue.is_open_now is False
        assert venue.busyness_level == busyness_level_for(4.6, 320)
        assert venue.busyness_score == busyness_score_for(4.6, 320)
        assert venue.peak_hours == ["21:00", "22:00", "23:00", "00:00", "01:00"]
        assert venue.features == ["Dance Floor", "DJ", "VIP Area", "Online Presence"]
        assert venue.image_url == (
            "https://api.example.com/api/venues/photo?photoReference=ref123&maxWidth=600"
        )
        assert venue.website == "https://stereo.example.com"
        assert len(venue.reviews) == 3
        assert venue.distance_km is None

    def test_defaults_for_sparse_record(self) -> None:
        venue = self.normalizer.normalize(make_place("p2", "Quiet Pub"), {})

        assert venue is not None
        assert venue.phone == "(555) 000-0000"
        assert venue.rating == 4.0
        assert venue.rating_count is None
        assert venue.price_tier == PriceTier.MODERATE
        assert venue.is_open_now is True
        assert venue.address == ""
        assert venue.features == ["Drinks", "Happy Hour", "Music"]
        assert venue.image_url in FALLBACK_IMAGES
        assert venue.busyness_score == 48

    def test_summary_fills_gaps(self) -> None:
        summary = make_place(
            "p3",
            "Summary Lounge",
            vicinity="5 Ross Ave",
            rating=3.8,
            user_ratings_total=42,
            opening_hours={"open_now": False},
        )
        detail = {"international_phone_number": "+1 214-555-0199"}

        venue = self.normalizer.normalize(summary, detail)

        assert venue is not None
        assert venue.name == "Summary Lounge"
        assert venue.address == "5 Ross Ave"
        assert venue.rating == 3.8
        assert venue.rating_count == 42
        assert venue.is_open_now is False
        assert venue.phone == "+1 214-555-0199"

    def test_zero_rating_treated_as_missing(self) -> None:
        venue = self.normalizer.normalize(make_place("p4", "New Bar", rating=0), {})
        assert venue is not None
        assert venue.rating == 4.0

    def test_missing_geometry_is_dropped(self) -> None:
        assert self.normalizer.normalize({"place_id": "p5", "name": "Ghost Bar"}, {}) is None

    @pytest.mark.parametrize(
        "location",
        [
            {"lat": "32.7", "lng": -96.8},
            {"lat": 95.0, "lng": -96.8},
            {"lat": 32.7, "lng": 181.0},
            {"lat": float("nan"), "lng": -96.8},
            {"lat": 32.7},
            None,
        ],
    )
    def test_malformed_geometry_is_dropped(self, location) -> None:
        summary = {"place_id": "p6", "name": "Bad Bar", "geometry": {"location": location}}
        assert self.normalizer.normalize(summary, {}) is None

    def test_missing_place_id_is_dropped(self) -> None:
        summary = make_place("", "Nameless Bar")
        assert self.normalizer.normalize(summary, {}) is None

    def test_fallback_image_is_reproducible_with_seed(self) -> None:
        first = VenueNormalizer(rng=random.Random(42)).resolve_image(None)
        second = VenueNormalizer(rng=random.Random(42)).resolve_image([])
        assert first == second
        assert first in FALLBACK_IMAGES

    def test_relative_photo_url_without_base(self) -> None:
        url = VenueNormalizer().resolve_image([{"photo_reference": "abc"}])
        assert url == "/api/venues/photo?photoReference=abc&maxWidth=600"

    def test_non_finite_numbers_are_treated_as_missing(self) -> None:
        detail = {
            "rating": float("nan"),
            "user_ratings_total": float("nan"),
            "price_level": float("inf"),
        }

        venue = self.normalizer.normalize(make_place("p7", "Infinity Bar"), detail)

        assert venue is not None
        assert venue.rating == 4.0
        assert venue.rating_count is None
        assert venue.price_tier == PriceTier.MODERATE
        assert venue.busyness_score == 48

    def test_infinite_price_level_is_not_upscale(self) -> None:
        venue = self.normalizer.normalize(make_place("p8", "Endless Bar", price_level=float("inf")), {})
        assert venue is not None
        assert "Upscale" not in venue.features
