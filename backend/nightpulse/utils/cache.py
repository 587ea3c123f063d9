"""In-memory cache with per-entry TTL expiration.

Process-level cache for provider payloads and aggregated venue lists.
Entries expire lazily on read; ``sweep_expired`` drops everything stale.
Nothing is evicted on write.
"""

import time
from typing import Any, Callable


class TTLCache:
    """TTL-aware key/value cache for provider responses."""

    def __init__(
        self,
        ttl_seconds: float = 600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._cache: dict[str, tuple[float, Any]] = {}
        self._ttl = ttl_seconds
        self._clock = clock
        self._hits = 0
        self._misses = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def _is_expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self._ttl

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._cache.get(key)
        if entry is None:
            self._misses += 1
            return default
        stored_at, value = entry
        if self._is_expired(stored_at, self._clock()):
            # Only drop the entry we read; a concurrent set may have replaced it
            if self._cache.get(key) is entry:
                del self._cache[key]
            self._misses += 1
            return default
        self._hits += 1
        return value

    def set(self, key: str, value: Any) -> None:
        self._cache[key] = (self._clock(), value)

    def sweep_expired(self) -> None:
        now = self._clock()
        expired = [
            key
            for key, (stored_at, _) in list(self._cache.items())
            if self._is_expired(stored_at, now)
        ]
        for key in expired:
            self._cache.pop(key, None)

    def clear(self) -> None:
        self._cache.clear()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._cache)

    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "size": len(self._cache),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }
