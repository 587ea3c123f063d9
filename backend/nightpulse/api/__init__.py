"""HTTP API for NightPulse."""

from .routes import router

__all__ = ["router"]
