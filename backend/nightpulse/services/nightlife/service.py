"""Nightlife filtering.

Provider searches for generic types such as ``restaurant`` or ``bar`` also
return diners and cafes, so normalized venues are post-filtered on their
name and address. A second filter uses busyness telemetry to select venues
that are busy during nightlife hours (22:00-08:00).
"""

import logging
import random
from datetime import datetime
from typing import Callable, Iterable, Mapping

from nightpulse.models import BusynessData, HourlyBusyness, Venue

logger = logging.getLogger(__name__)


NIGHTLIFE_KEYWORDS = (
    "bar",
    "club",
    "nightclub",
    "lounge",
    "pub",
    "tavern",
    "brewery",
    "cocktail",
    "hookah",
    "shisha",
    "dance",
    "disco",
    "nightlife",
)

NIGHTLIFE_START_HOUR = 22
NIGHTLIFE_END_HOUR = 8
BUSY_THRESHOLD = 50
PEAK_NIGHT_HOURS = (22, 23, 0, 1, 2)


def is_nightlife_hour(hour: int) -> bool:
    """Whether ``hour`` (0-23) falls in the 22:00-08:00 window, both ends inclusive."""
    return hour >= NIGHTLIFE_START_HOUR or hour <= NIGHTLIFE_END_HOUR


class NightlifeFilter:
    """Selects nightlife venues and venues that are busy at night."""

    def __init__(
        self,
        now: Callable[[], datetime] = datetime.now,
        rng: random.Random | None = None,
    ) -> None:
        self._now = now
        self._rng = rng or random.Random()

    @staticmethod
    def is_nightlife_venue(venue: Venue) -> bool:
        text = f"{venue.name} {venue.address}".lower()
        return any(keyword in text for keyword in NIGHTLIFE_KEYWORDS)

    def filter_venues(self, venues: Iterable[Venue]) -> list[Venue]:
        return [venue for venue in venues if self.is_nightlife_venue(venue)]

    def filter_busy_during_nightlife_hours(
        self,
        venues: Iterable[Venue],
        busyness: Iterable[BusynessData] | Mapping[str, BusynessData],
        hour: int | None = None,
    ) -> list[Venue]:
        """Keep venues that are busy now (at night) or will be busy tonight.

        During the nightlife window a venue is kept when its current
        busyness is at least 50. Outside the window it is kept when it
        peaks during nightlife hours. Venues without busyness data are kept.

        Args:
            venues: Venues to filter.
            busyness: Busyness records, either a list or keyed by venue id.
            hour: Hour of day to evaluate; defaults to the current hour.
        """
        if isinstance(busyness, Mapping):
            by_venue = dict(busyness)
        else:
            by_venue = {}
            for record in busyness:
                # First record per venue wins
                by_venue.setdefault(record.venue_id, record)

        if hour is None:
            hour = self._now().hour
        night = is_nightlife_hour(hour)

        kept = []
        for venue in venues:
            data = by_venue.get(venue.id)
            if data is None:
                kept.append(venue)
            elif night:
                if data.current_busyness >= BUSY_THRESHOLD:
                    kept.append(venue)
            elif data.is_nightlife_peak:
                kept.append(venue)
        return kept

    def mock_busyness(self, venue_ids: Iterable[str]) -> list[BusynessData]:
        """Synthetic busyness feed used when no live telemetry is available."""
        records = []
        for venue_id in venue_ids:
            predicted = [
                HourlyBusyness(
                    hour=hour,
                    busyness=(
                        self._rng.randint(70, 99)
                        if is_nightlife_hour(hour)
                        else self._rng.randint(20, 69)
                    ),
                )
                for hour in range(24)
            ]
            records.append(
                BusynessData(
                    venue_id=venue_id,
                    current_busyness=self._rng.randint(60, 99),
                    predicted_busyness=predicted,
                    is_nightlife_peak=True,
                    peak_night_hours=list(PEAK_NIGHT_HOURS),
                )
            )
        return records
