"""Geocoding routes."""

from typing import Optional

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query

from atlas.application.usecase.geocode import (
    ReverseGeocodeRequest,
    ReverseGeocodeUseCase,
    SearchPlacesResponse,
    SearchPlacesUseCase,
)
from atlas.domain.model import LocationPick

router = APIRouter(prefix="/geocode", tags=["geocode"], route_class=DishkaRoute)


@router.get("/reverse", response_model=LocationPick)
async def reverse_geocode(
    reverse_geocode_use_case: FromDishka[ReverseGeocodeUseCase],
    latitude: float = Query(ge=-90, le=90),
    longitude: float = Query(ge=-180, le=180),
    zoom: Optional[float] = Query(default=None, ge=0, le=24),
) -> LocationPick:
    """Pick a report location.

    Always answers: when the provider fails, the address is the
    coordinate literal.
    """
    return await reverse_geocode_use_case.execute(
        ReverseGeocodeRequest(latitude=latitude, longitude=longitude, zoom=zoom)
    )


@router.get("/search", response_model=SearchPlacesResponse)
async def search_places(
    search_places_use_case: FromDishka[SearchPlacesUseCase],
    q: str = Query(default="", max_length=200),
    limit: Optional[int] = Query(default=None, ge=1, le=10),
) -> SearchPlacesResponse:
    """Place autocomplete for the map search box."""
    return await search_places_use_case.execute(q, limit)
