"""Places provider module.

Provides the provider interface used by the aggregator and the Google
Places web service implementation.
"""

from .service import (
    GooglePlacesService,
    PlacesProvider,
    ProviderConfigError,
    ProviderError,
    ProviderResponseError,
    build_photo_proxy_url,
)

__all__ = [
    "GooglePlacesService",
    "PlacesProvider",
    "ProviderConfigError",
    "ProviderError",
    "ProviderResponseError",
    "build_photo_proxy_url",
]
