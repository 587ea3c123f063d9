"""Fixed mock venues served when the provider cannot be used.

Keyed by city display name. Unknown or missing cities get the default
city's set.
"""

from nightpulse.models import (
    BusynessLevel,
    Coordinates,
    PriceTier,
    Venue,
    VenueCategory,
)

DEFAULT_MOCK_CITY = "Dallas, TX"


def _venue(venue_id: str, **fields) -> Venue:
    return Venue(id=venue_id, provider_id=venue_id, **fields)


MOCK_VENUES: dict[str, tuple[Venue, ...]] = {
    "Dallas, TX": (
        _venue(
            "mock-dallas-1",
            name="Deep Ellum Nightclub",
            category=VenueCategory.CLUB,
            coordinates=Coordinates(lat=32.7767, lng=-96.7970),
            address="123 Main St, Dallas, TX 75201",
            phone="(214) 555-0123",
            rating=4.5,
            rating_count=250,
            price_tier=PriceTier.MODERATE,
            is_open_now=True,
            busyness_level=BusynessLevel.VERY_HIGH,
            busyness_score=85,
            peak_hours=["22:00", "23:00", "00:00", "01:00", "02:00"],
            features=["Dance Floor", "DJ", "VIP Area", "Bottle Service"],
            image_url="https://images.pexels.com/photos/1449773/pexels-photo-1449773.jpeg",
            website="https://example.com",
        ),
        _venue(
            "mock-dallas-2",
            name="Uptown Sports Bar",
            category=VenueCategory.BAR,
            coordinates=Coordinates(lat=32.7831, lng=-96.8067),
            address="456 Elm St, Dallas, TX 75202",
            phone="(214) 555-0456",
            rating=4.2,
            rating_count=180,
            price_tier=PriceTier.MODERATE,
            is_open_now=True,
            busyness_level=BusynessLevel.HIGH,
            busyness_score=75,
            peak_hours=["19:00", "20:00", "21:00", "22:00", "23:00"],
            features=["Sports TV", "Happy Hour", "Pool Tables", "Outdoor Patio"],
            image_url="https://images.pexels.com/photos/274192/pexels-photo-274192.jpeg",
        ),
        _venue(
            "mock-dallas-3",
            name="Oasis Hookah Lounge",
            category=VenueCategory.HOOKAH,
            coordinates=Coordinates(lat=32.7555, lng=-96.8100),
            address="789 Commerce St, Dallas, TX 75203",
            phone="(214) 555-0789",
            rating=4.0,
            rating_count=95,
            price_tier=PriceTier.BUDGET,
            is_open_now=True,
            busyness_level=BusynessLevel.MODERATE,
            busyness_score=60,
            peak_hours=["20:00", "21:00", "22:00", "23:00", "00:00"],
            features=["Premium Flavors", "Private Rooms", "Games", "BYOB"],
            image_url="https://images.pexels.com/photos/3184292/pexels-photo-3184292.jpeg",
        ),
    ),
    "Houston, TX": (
        _venue(
            "mock-houston-1",
            name="Midtown Dance Club",
            category=VenueCategory.CLUB,
            coordinates=Coordinates(lat=29.7420, lng=-95.3774),
            address="2800 Main St, Houston, TX 77002",
            phone="(713) 555-0142",
            rating=4.4,
            rating_count=310,
            price_tier=PriceTier.UPSCALE,
            is_open_now=True,
            busyness_level=BusynessLevel.VERY_HIGH,
            busyness_score=83,
            peak_hours=["22:00", "23:00", "00:00", "01:00", "02:00"],
            features=["Dance Floor", "DJ", "VIP Area", "Upscale"],
            image_url="https://images.pexels.com/photos/1449773/pexels-photo-1449773.jpeg",
        ),
        _venue(
            "mock-houston-2",
            name="Washington Ave Tavern",
            category=VenueCategory.BAR,
            coordinates=Coordinates(lat=29.7706, lng=-95.3920),
            address="4500 Washington Ave, Houston, TX 77007",
            phone="(713) 555-0278",
            rating=4.1,
            rating_count=140,
            price_tier=PriceTier.MODERATE,
            is_open_now=True,
            busyness_level=BusynessLevel.HIGH,
            busyness_score=72,
            peak_hours=["19:00", "20:00", "21:00", "22:00", "23:00"],
            features=["Drinks", "Happy Hour", "Music", "Popular"],
            image_url="https://images.pexels.com/photos/274192/pexels-photo-274192.jpeg",
        ),
        _venue(
            "mock-houston-3",
            name="Montrose Shisha Lounge",
            category=VenueCategory.HOOKAH,
            coordinates=Coordinates(lat=29.7472, lng=-95.3907),
            address="1100 Westheimer Rd, Houston, TX 77006",
            phone="(713) 555-0391",
            rating=3.9,
            rating_count=80,
            price_tier=PriceTier.BUDGET,
            is_open_now=True,
            busyness_level=BusynessLevel.MODERATE,
            busyness_score=58,
            peak_hours=["20:00", "21:00", "22:00", "23:00", "00:00"],
            features=["Hookah", "Lounge", "BYOB"],
            image_url="https://images.pexels.com/photos/3184292/pexels-photo-3184292.jpeg",
        ),
    ),
    "Austin, TX": (
        _venue(
            "mock-austin-1",
            name="Sixth Street Cocktail Bar",
            category=VenueCategory.BAR,
            coordinates=Coordinates(lat=30.2672, lng=-97.7391),
            address="401 E 6th St, Austin, TX 78701",
            phone="(512) 555-0163",
            rating=4.6,
            rating_count=420,
            price_tier=PriceTier.MODERATE,
            is_open_now=True,
            busyness_level=BusynessLevel.VERY_HIGH,
            busyness_score=88,
            peak_hours=["21:00", "22:00", "23:00", "00:00", "01:00"],
            features=["Drinks", "Happy Hour", "Music", "Popular"],
            image_url="https://images.pexels.com/photos/274192/pexels-photo-274192.jpeg",
        ),
        _venue(
            "mock-austin-2",
            name="Rainey Street Disco",
            category=VenueCategory.CLUB,
            coordinates=Coordinates(lat=30.2587, lng=-97.7385),
            address="80 Rainey St, Austin, TX 78701",
            phone="(512) 555-0217",
            rating=4.3,
            rating_count=205,
            price_tier=PriceTier.UPSCALE,
            is_open_now=True,
            busyness_level=BusynessLevel.HIGH,
            busyness_score=76,
            peak_hours=["22:00", "23:00", "00:00", "01:00", "02:00"],
            features=["Dance Floor", "DJ", "VIP Area", "Popular"],
            image_url="https://images.pexels.com/photos/1449773/pexels-photo-1449773.jpeg",
        ),
        _venue(
            "mock-austin-3",
            name="East Side Hookah Lounge",
            category=VenueCategory.HOOKAH,
            coordinates=Coordinates(lat=30.2625, lng=-97.7226),
            address="1200 E 11th St, Austin, TX 78702",
            phone="(512) 555-0384",
            rating=4.0,
            rating_count=70,
            price_tier=PriceTier.BUDGET,
            is_open_now=True,
            busyness_level=BusynessLevel.MODERATE,
            busyness_score=55,
            peak_hours=["20:00", "21:00", "22:00", "23:00", "00:00"],
            features=["Hookah", "Lounge", "BYOB"],
            image_url="https://images.pexels.com/photos/3184292/pexels-photo-3184292.jpeg",
        ),
    ),
}

_CITY_LOOKUP = {city.lower(): city for city in MOCK_VENUES}


def _lookup(city: str | None) -> str | None:
    if not city:
        return None
    return _CITY_LOOKUP.get(" ".join(city.split()).lower())


def resolve_mock_city(city: str | None, default: str = DEFAULT_MOCK_CITY) -> str:
    """Canonical mock city for a caller's hint, else the default city."""
    return _lookup(city) or _lookup(default) or DEFAULT_MOCK_CITY


def get_mock_venues(city: str | None, default: str = DEFAULT_MOCK_CITY) -> list[Venue]:
    """Mock venues for ``city``; always the same records in the same order."""
    return list(MOCK_VENUES[resolve_mock_city(city, default)])
