"""Shared helpers: in-memory TTL cache and geo distance."""

from .cache import TTLCache
from .geo import EARTH_RADIUS_KM, distance_between, haversine_distance

__all__ = [
    "TTLCache",
    "EARTH_RADIUS_KM",
    "distance_between",
    "haversine_distance",
]
