"""Rate limiter for outbound provider calls."""

from .service import RateLimiter, UsageStats

__all__ = ["RateLimiter", "UsageStats"]
