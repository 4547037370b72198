"""Reverse geocode use case."""

from typing import Optional

from pydantic import BaseModel

from atlas.config import MapSettings
from atlas.domain.model import LocationPick
from atlas.domain.service import GeocodingService
from atlas.domain.value import GeoPoint


class ReverseGeocodeRequest(BaseModel):
    """Reverse geocode request."""

    latitude: float
    longitude: float
    zoom: Optional[float] = None  # Current map zoom


class ReverseGeocodeUseCase:
    """Use case for picking a report location on the map."""

    def __init__(
        self, geocoding_service: GeocodingService, map_settings: MapSettings
    ) -> None:
        """Initialize reverse geocode use case.

        Args:
            geocoding_service: Geocoding domain service
            map_settings: Default zoom when the client sends none
        """
        self.geocoding_service = geocoding_service
        self.map_settings = map_settings

    async def execute(self, request: ReverseGeocodeRequest) -> LocationPick:
        """Resolve the address; never fails because of the provider."""
        point = GeoPoint(latitude=request.latitude, longitude=request.longitude)
        zoom = request.zoom if request.zoom is not None else self.map_settings.default_zoom
        return await self.geocoding_service.pick_location(point, zoom)
