"""Places provider clients.

The aggregator talks to the provider through the ``PlacesProvider``
interface:

- ``search_nearby``: nearby search for one venue type
- ``get_details``: the full record for one place
- ``photo_url``: deterministic photo URL construction (no network)

``GooglePlacesService`` implements it against the Google Places web
service. Any non-success status, non-JSON payload (Google serves an HTML
page when the key is invalid) or transport error is raised as a
``ProviderError`` so the caller can treat that sub-query as empty.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from urllib.parse import urlencode

import httpx

from nightpulse.config import is_usable_api_key
from nightpulse.models import Coordinates

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Base class for places provider failures."""


class ProviderConfigError(ProviderError):
    """Provider rejected the request because of key or setup problems."""


class ProviderResponseError(ProviderError):
    """Provider answered with a non-success status or a malformed payload."""

    def __init__(self, message: str, status: str | None = None) -> None:
        super().__init__(message)
        self.status = status


# Statuses Google returns when the key is missing, invalid or not enabled
CONFIG_ERROR_STATUSES = frozenset({"REQUEST_DENIED", "OVER_QUERY_LIMIT"})


def build_photo_proxy_url(base_url: str, photo_reference: str, max_width: int = 600) -> str:
    """Build the URL of our own photo endpoint for a provider photo reference."""
    query = urlencode({"photoReference": photo_reference, "maxWidth": max_width})
    return f"{base_url.rstrip('/')}/api/venues/photo?{query}"


class PlacesProvider(ABC):
    """Abstract base class for places providers."""

    @property
    def is_configured(self) -> bool:
        return True

    @abstractmethod
    async def search_nearby(
        self, location: Coordinates, radius_meters: int, venue_type: str
    ) -> list[dict]:
        """Return raw summary records of one venue type around ``location``."""
        pass

    @abstractmethod
    async def get_details(self, place_id: str) -> dict:
        """Return the raw detail record for ``place_id``."""
        pass

    @abstractmethod
    def photo_url(self, photo_reference: str, max_width: int = 400) -> str:
        pass

    async def close(self) -> None:
        pass


class GooglePlacesService(PlacesProvider):
    """Google Places web service client.

    Uses a shared httpx client with connection pooling. Transient transport
    failures are retried once; everything else surfaces as ``ProviderError``.
    """

    BASE_URL = "https://maps.googleapis.com/maps/api/place"

    HEADERS = {
        "User-Agent": "NightPulse/1.0",
        "Accept": "application/json",
    }

    def __init__(
        self,
        api_key: str,
        timeout: float = 10.0,
        max_retries: int = 1,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._timeout = timeout
        self._max_retries = max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return is_usable_api_key(self._api_key)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers=self.HEADERS,
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request_json(self, endpoint: str, params: dict) -> dict:
        """GET a provider endpoint and return its decoded JSON body.

        Raises:
            ProviderConfigError: The provider served a non-JSON body.
            ProviderResponseError: HTTP error status or undecodable JSON.
            ProviderError: Transport failure after retries.
        """
        url = f"{self.BASE_URL}/{endpoint}/json"
        client = self._get_client()
        params = {**params, "key": self._api_key}

        for attempt in range(self._max_retries + 1):
            try:
                response = await client.get(url, params=params)
                break
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt < self._max_retries:
                    logger.info(
                        f"[PLACES] Retry {attempt + 1}/{self._max_retries} for {endpoint}: {type(e).__name__}"
                    )
                    await asyncio.sleep(0.5)
                    continue
                raise ProviderError(f"{endpoint} request failed: {type(e).__name__}") from e
            except httpx.HTTPError as e:
                raise ProviderError(f"{endpoint} request failed: {e}") from e

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            snippet = response.text[:200]
            logger.error(
                f"[PLACES] Expected JSON from {endpoint}, got {content_type or 'no content type'}: {snippet}"
            )
            raise ProviderConfigError(
                f"{endpoint} returned non-JSON content ({content_type or 'unknown'}); "
                "check the API key and that the Places API is enabled"
            )

        if response.is_error:
            raise ProviderResponseError(
                f"{endpoint} failed with HTTP {response.status_code}",
                status=str(response.status_code),
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderResponseError(f"{endpoint} returned malformed JSON") from e

        if not isinstance(data, dict):
            raise ProviderResponseError(f"{endpoint} returned an unexpected payload")
        return data

    def _raise_for_status(self, endpoint: str, data: dict, accepted: set[str]) -> None:
        status = data.get("status")
        if status in accepted:
            return
        message = data.get("error_message") or f"API returned status: {status}"
        if status in CONFIG_ERROR_STATUSES:
            raise ProviderConfigError(f"{endpoint}: {message}")
        raise ProviderResponseError(f"{endpoint}: {message}", status=status)

    async def search_nearby(
        self, location: Coordinates, radius_meters: int, venue_type: str
    ) -> list[dict]:
        data = await self._request_json(
            "nearbysearch",
            {
                "location": f"{location.lat},{location.lng}",
                "radius": radius_meters,
                "type": venue_type,
            },
        )
        self._raise_for_status("nearbysearch", data, {"OK", "ZERO_RESULTS"})

        results = data.get("results") or []
        if not isinstance(results, list):
            raise ProviderResponseError("nearbysearch: results is not a list")

        logger.info(f"[PLACES] {len(results)} {venue_type} results near ({location.lat:.4f}, {location.lng:.4f})")
        return [r for r in results if isinstance(r, dict)]

    async def get_details(self, place_id: str) -> dict:
        if not place_id:
            raise ValueError("place_id is required")

        data = await self._request_json("details", {"place_id": place_id})
        self._raise_for_status("details", data, {"OK"})

        result = data.get("result")
        if not isinstance(result, dict):
            raise ProviderResponseError("details: missing result")
        return result

    def photo_url(self, photo_reference: str, max_width: int = 400) -> str:
        query = urlencode(
            {
                "maxwidth": max_width,
                "photo_reference": photo_reference,
                "key": self._api_key,
            }
        )
        return f"{self.BASE_URL}/photo?{query}"
