"""Mapbox Places geocoding client.

Reverse and forward geocoding over the Mapbox Geocoding v5 API. Transport
errors are retried a bounded number of times with exponential backoff.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import logfire

from atlas.adapter.error import GeocodingError
from atlas.config import GeocodingSettings
from atlas.domain.service.geocoding_service import GeocodingClient
from atlas.domain.value import GeocodeResult, GeoPoint


class MapboxGeocodingClient(GeocodingClient):
    """Base class for Mapbox geocoding clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealMapboxGeocodingClient(MapboxGeocodingClient):
    """Geocoding client backed by the Mapbox Places API."""

    def __init__(
        self,
        settings: GeocodingSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize Mapbox client.

        Args:
            settings: Geocoding settings (token, locale, retry policy)
            transport: Optional httpx transport (tests use a mock transport)
            sleep: Awaitable used between retries
        """
        self.settings = settings
        self.transport = transport
        self._sleep = sleep
        self.places_url = f"{settings.base_url.rstrip('/')}/geocoding/v5/mapbox.places"

    def _params(self, **extra: Any) -> Dict[str, Any]:
        return {
            "access_token": self.settings.access_token,
            "country": self.settings.country,
            "language": self.settings.language,
            **extra,
        }

    async def _get_features(self, url: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """GET a places endpoint, retrying transport errors.

        Raises:
            GeocodingError: If the provider answers with an error status or
                stays unreachable after the configured retries
        """
        if not self.settings.access_token:
            raise GeocodingError("Mapbox access token is not configured")

        attempt = 0
        while True:
            try:
                async with httpx.AsyncClient(
                    timeout=self.settings.timeout, transport=self.transport
                ) as client:
                    response = await client.get(url, params=params)
                break
            except httpx.TransportError as e:
                attempt += 1
                if attempt > self.settings.max_retries:
                    logfire.error("Mapbox unreachable", error=str(e), attempts=attempt)
                    raise GeocodingError(f"Mapbox unreachable: {e}") from e
                delay = self.settings.retry_base_delay * 2 ** (attempt - 1)
                logfire.warn("Mapbox request failed, retrying", error=str(e), delay=delay)
                await self._sleep(delay)

        if response.status_code != 200:
            logfire.error(
                "Mapbox request failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise GeocodingError(f"Mapbox request failed: {response.status_code}")

        try:
            features = response.json().get("features") or []
        except ValueError as e:
            raise GeocodingError(f"Invalid Mapbox response: {e}") from e
        return [f for f in features if isinstance(f, dict)]

    async def reverse(self, point: GeoPoint) -> Optional[str]:
        """Resolve a point to the best matching place name."""
        with logfire.span(
            "mapbox.reverse", latitude=point.latitude, longitude=point.longitude
        ):
            url = f"{self.places_url}/{point.longitude},{point.latitude}.json"
            features = await self._get_features(url, self._params(limit=1))
            if not features:
                return None
            return features[0].get("place_name")

    async def search(self, query: str, limit: int) -> List[GeocodeResult]:
        """Forward geocoding for autocomplete."""
        with logfire.span("mapbox.search", query=query, limit=limit):
            url = f"{self.places_url}/{quote(query, safe='')}.json"
            features = await self._get_features(
                url, self._params(limit=limit, autocomplete="true")
            )
            results: List[GeocodeResult] = []
            for feature in features:
                center = feature.get("center") or []
                label = feature.get("place_name")
                if len(center) != 2 or not label:
                    continue
                results.append(
                    GeocodeResult(
                        point=GeoPoint(latitude=center[1], longitude=center[0]),
                        label=label,
                    )
                )
            return results


class MockMapboxGeocodingClient(MapboxGeocodingClient):
    """Mock geocoding client for testing.

    Returns configured answers without making real API calls. Setting
    ``fail`` makes every call raise GeocodingError.
    """

    def __init__(self) -> None:
        """Initialize mock client without real provider configuration."""
        self.addresses: Dict[tuple[float, float], str] = {}
        self.places: List[GeocodeResult] = []
        self.fail = False
        self.calls: List[str] = []

    async def reverse(self, point: GeoPoint) -> Optional[str]:
        self.calls.append(f"reverse:{point.as_literal()}")
        if self.fail:
            raise GeocodingError("Mock geocoding failure")
        return self.addresses.get((point.latitude, point.longitude))

    async def search(self, query: str, limit: int) -> List[GeocodeResult]:
        self.calls.append(f"search:{query}")
        if self.fail:
            raise GeocodingError("Mock geocoding failure")
        matches = [p for p in self.places if query.lower() in p.label.lower()]
        return matches[:limit]
