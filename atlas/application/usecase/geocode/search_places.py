"""Search places use case."""

from typing import Optional

from pydantic import BaseModel

from atlas.domain.service import GeocodingService
from atlas.domain.value import GeocodeResult


class SearchPlacesResponse(BaseModel):
    """Autocomplete suggestions."""

    results: list[GeocodeResult]


class SearchPlacesUseCase:
    """Use case for address autocomplete."""

    def __init__(self, geocoding_service: GeocodingService) -> None:
        """Initialize search places use case.

        Args:
            geocoding_service: Geocoding domain service
        """
        self.geocoding_service = geocoding_service

    async def execute(self, query: str, limit: Optional[int] = None) -> SearchPlacesResponse:
        """Search for places matching the query."""
        results = await self.geocoding_service.search(query, limit)
        return SearchPlacesResponse(results=results)
