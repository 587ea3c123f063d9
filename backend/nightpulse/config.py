"""Runtime configuration loaded from the environment (and ``.env``)."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

try:
    load_dotenv()
except Exception:
    pass  # Missing or unreadable .env is fine; plain env vars still apply

# Values copied from setup docs that were never replaced with a real key
PLACEHOLDER_API_KEYS = frozenset(
    {
        "your_actual_google_maps_api_key_here",
        "YOUR_ACTUAL_API_KEY_HERE",
    }
)

DEFAULT_VENUE_TYPES = ("night_club", "bar", "restaurant")


def is_usable_api_key(api_key: str | None) -> bool:
    """Whether an API key looks configured (non-empty, not a placeholder)."""
    if not api_key or not api_key.strip():
        return False
    return api_key.strip() not in PLACEHOLDER_API_KEYS


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw else default


@dataclass(frozen=True)
class Settings:
    google_maps_api_key: str = ""
    public_base_url: str = ""
    request_spacing_ms: int = 100
    cache_ttl_seconds: int = 600
    provider_timeout_seconds: float = 10.0
    query_timeout_seconds: float = 15.0
    default_radius_km: float = 15.0
    default_city: str = "Dallas, TX"
    venue_types: tuple[str, ...] = field(default=DEFAULT_VENUE_TYPES)

    @property
    def has_api_key(self) -> bool:
        return is_usable_api_key(self.google_maps_api_key)

    @classmethod
    def from_env(cls) -> "Settings":
        venue_types = os.getenv("NIGHTPULSE_VENUE_TYPES")
        return cls(
            google_maps_api_key=(
                os.getenv("GOOGLE_MAPS_API_KEY")
                or os.getenv("EXPO_PUBLIC_GOOGLE_MAPS_API_KEY")
                or ""
            ),
            public_base_url=os.getenv("NIGHTPULSE_PUBLIC_BASE_URL", "").rstrip("/"),
            request_spacing_ms=_env_int("NIGHTPULSE_REQUEST_SPACING_MS", 100),
            cache_ttl_seconds=_env_int("NIGHTPULSE_CACHE_TTL_SECONDS", 600),
            provider_timeout_seconds=_env_float("NIGHTPULSE_PROVIDER_TIMEOUT", 10.0),
            query_timeout_seconds=_env_float("NIGHTPULSE_QUERY_TIMEOUT", 15.0),
            default_radius_km=_env_float("NIGHTPULSE_DEFAULT_RADIUS_KM", 15.0),
            default_city=os.getenv("NIGHTPULSE_DEFAULT_CITY", "Dallas, TX"),
            venue_types=(
                tuple(t.strip() for t in venue_types.split(",") if t.strip())
                if venue_types
                else DEFAULT_VENUE_TYPES
            ),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
