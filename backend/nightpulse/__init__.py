"""NightPulse: nightlife venue aggregation with busyness estimates."""

__version__ = "0.1.0"
