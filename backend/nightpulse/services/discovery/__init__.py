"""Cached nightlife discovery module."""

from .service import NightlifeDiscoveryService, is_peak_time, with_distances

__all__ = ["NightlifeDiscoveryService", "is_peak_time", "with_distances"]
