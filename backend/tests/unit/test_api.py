"""Tests for the HTTP API.

Services are replaced with in-memory fakes through ``set_services`` after
the app has started, so no provider is contacted.
"""

import random

import pytest
from fastapi.testclient import TestClient

from nightpulse.api import routes
from nightpulse.api.routes import set_services
from nightpulse.config import Settings
from nightpulse.main import app
from nightpulse.services import (
    NightlifeDiscoveryService,
    ProviderConfigError,
    RateLimiter,
    VenueAggregator,
    VenueNormalizer,
)
from nightpulse.utils.cache import TTLCache
from tests.unit.fakes import FakePlacesProvider, make_place

DALLAS = {"lat": 32.7767, "lng": -96.7970}


def install(provider: FakePlacesProvider) -> None:
    cache = TTLCache()
    limiter = RateLimiter(min_interval_ms=0)
    aggregator = VenueAggregator(
        provider=provider,
        cache=cache,
        rate_limiter=limiter,
        normalizer=VenueNormalizer(photo_base_url="http://testserver", rng=random.Random(2)),
    )
    set_services(
        NightlifeDiscoveryService(
            aggregator=aggregator,
            result_cache=TTLCache(),
            rate_limiter=limiter,
            provider_cache=cache,
        ),
        provider=provider,
    )


def failing_provider() -> FakePlacesProvider:
    error = ProviderConfigError("nearbysearch: The provided API key is invalid.")
    return FakePlacesProvider(
        search_results={"night_club": error, "bar": error, "restaurant": error}
    )


class TestNightlifeEndpoint:
    """Tests for POST /api/venues/nightlife."""

    def test_fallback_venues_sorted(self) -> None:
        with TestClient(app) as client:
            install(failing_provider())
            response = client.post(
                "/api/venues/nightlife",
                json={"location": DALLAS, "radius_km": 15, "city": "Dallas, TX"},
            )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["source"] == "fallback"
        assert data["fallback_reason"] == "all_queries_failed"
        assert [v["name"] for v in data["venues"]] == [
            "Deep Ellum Nightclub",
            "Uptown Sports Bar",
            "Oasis Hookah Lounge",
        ]
        assert [v["busyness_score"] for v in data["venues"]] == [85, 75, 60]
        assert data["venues"][0]["busyness_level"] == "very-high"

    def test_provider_venues(self) -> None:
        provider = FakePlacesProvider(
            search_results={
                "bar": [make_place("bar-1", "Ace Pub", photos=[{"photo_reference": "ref1"}])]
            },
            details={"bar-1": {"rating": 4.4, "user_ratings_total": 150}},
        )
        with TestClient(app) as client:
            install(provider)
            response = client.post(
                "/api/venues/nightlife",
                json={"location": DALLAS, "reference": {"lat": 32.78, "lng": -96.80}},
            )

        data = response.json()
        assert data["success"] is True
        assert data["source"] == "provider"
        assert data["fallback_reason"] is None
        venue = data["venues"][0]
        assert venue["id"] == "bar-1"
        assert venue["image_url"] == (
            "http://testserver/api/venues/photo?photoReference=ref1&maxWidth=600"
        )
        assert venue["distance_km"] == 0

    @pytest.mark.parametrize(
        "payload, field",
        [
            ({"location": {"lat": 100, "lng": 0}}, "center"),
            ({"location": DALLAS, "radius_km": 0}, "radius_km"),
            ({"location": DALLAS, "radius_km": -5}, "radius_km"),
        ],
    )
    def test_invalid_input(self, payload: dict, field: str) -> None:
        with TestClient(app) as client:
            install(failing_provider())
            response = client.post("/api/venues/nightlife", json=payload)

        # Reported in the response envelope, not as an HTTP error
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["venues"] == []
        assert data["error"]["code"] == "INVALID_INPUT"
        assert data["error"]["field"] == field

    def test_missing_location_is_rejected(self) -> None:
        with TestClient(app) as client:
            install(failing_provider())
            response = client.post("/api/venues/nightlife", json={"radius_km": 15})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_radius_defaults_from_settings(self, monkeypatch) -> None:
        provider = FakePlacesProvider()
        monkeypatch.setattr(routes, "get_settings", lambda: Settings(default_radius_km=5.0))
        with TestClient(app) as client:
            install(provider)
            client.post("/api/venues/nightlife", json={"location": DALLAS})

        assert provider.search_calls
        assert all(call[1] == 5000 for call in provider.search_calls)


class TestPhotoEndpoint:
    """Tests for GET /api/venues/photo."""

    def test_redirects_to_provider(self) -> None:
        with TestClient(app) as client:
            install(failing_provider())
            response = client.get(
                "/api/venues/photo",
                params={"photoReference": "ref123", "maxWidth": 600},
                follow_redirects=False,
            )

        assert response.status_code == 307
        assert response.headers["location"] == "https://photos.example.com/ref123?maxwidth=600"

    def test_requires_reference(self) -> None:
        with TestClient(app) as client:
            install(failing_provider())
            response = client.get("/api/venues/photo", follow_redirects=False)

        assert response.status_code == 422


class TestStatsAndMaintenance:
    """Tests for usage stats, maintenance and health."""

    def test_stats_count_provider_calls(self) -> None:
        with TestClient(app) as client:
            install(failing_provider())
            client.post("/api/venues/nightlife", json={"location": DALLAS})
            stats = client.get("/api/venues/stats").json()

        assert stats["total_requests"] == 3
        assert stats["estimated_cost"] == pytest.approx(3 * 0.056)
        assert stats["result_cache"]["size"] == 0

    def test_maintenance(self) -> None:
        with TestClient(app) as client:
            install(failing_provider())
            response = client.post("/api/venues/maintenance")

        data = response.json()
        assert data["success"] is True
        assert "provider_cache" in data["stats"]

    def test_health(self) -> None:
        with TestClient(app) as client:
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}
