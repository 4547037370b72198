"""Geocoding domain service."""

from typing import List, Optional

import logfire

from atlas.domain.model import CameraMove, LocationPick
from atlas.domain.value import GeocodeResult, GeoPoint

from .base import Service


class GeocodingClient:
    """Generic geocoding client interface."""

    async def reverse(self, point: GeoPoint) -> Optional[str]:
        """Resolve a point to a place name.

        Args:
            point: Location to resolve

        Returns:
            Best matching address, or None if nothing matched

        Raises:
            GeocodingError: If the provider cannot be reached
        """
        raise NotImplementedError

    async def search(self, query: str, limit: int) -> List[GeocodeResult]:
        """Forward geocoding (autocomplete).

        Args:
            query: Free-text query
            limit: Maximum number of results

        Returns:
            Ranked suggestions

        Raises:
            GeocodingError: If the provider cannot be reached
        """
        raise NotImplementedError


class GeocodingService(Service):
    """Domain service for address lookups.

    Geocoding is a convenience: failures never block reporting, they only
    degrade the address to a coordinate literal.
    """

    def __init__(
        self,
        geocoding_client: GeocodingClient,
        pick_min_zoom: float = 16.0,
        move_duration_ms: int = 1500,
        search_limit: int = 5,
    ) -> None:
        """Initialize geocoding service.

        Args:
            geocoding_client: Provider client
            pick_min_zoom: Minimum zoom after picking a location
            move_duration_ms: Camera transition duration after a pick
            search_limit: Default number of autocomplete results
        """
        self.geocoding_client = geocoding_client
        self.pick_min_zoom = pick_min_zoom
        self.move_duration_ms = move_duration_ms
        self.search_limit = search_limit

    async def reverse_address(self, point: GeoPoint) -> str:
        """Address for a point, or its coordinate literal on any failure."""
        with logfire.span(
            "geocoding_service.reverse_address",
            latitude=point.latitude,
            longitude=point.longitude,
        ):
            try:
                address = await self.geocoding_client.reverse(point)
            except Exception as e:
                logfire.warn(
                    "Reverse geocoding failed, using coordinates",
                    error=str(e),
                    latitude=point.latitude,
                    longitude=point.longitude,
                )
                return point.as_literal()
            if not address or not address.strip():
                logfire.info("No address found, using coordinates")
                return point.as_literal()
            return address.strip()

    async def pick_location(self, point: GeoPoint, current_zoom: float) -> LocationPick:
        """Resolve a clicked map point for a new report.

        Args:
            point: Clicked location
            current_zoom: Zoom at the time of the click

        Returns:
            The point, its address and the camera move that centres it
        """
        address = await self.reverse_address(point)
        camera = CameraMove(
            center=point,
            zoom=max(current_zoom, self.pick_min_zoom),
            duration_ms=self.move_duration_ms,
        )
        return LocationPick(point=point, address=address, camera=camera)

    async def search(self, query: str, limit: Optional[int] = None) -> List[GeocodeResult]:
        """Autocomplete suggestions; blank queries never reach the provider."""
        query = query.strip()
        if not query:
            return []
        with logfire.span("geocoding_service.search", query=query):
            try:
                return await self.geocoding_client.search(query, limit or self.search_limit)
            except Exception as e:
                logfire.error("Geocoding search failed", query=query, error=str(e))
                return []
