"""Nightlife filter module."""

from .service import NIGHTLIFE_KEYWORDS, NightlifeFilter, is_nightlife_hour

__all__ = ["NIGHTLIFE_KEYWORDS", "NightlifeFilter", "is_nightlife_hour"]
