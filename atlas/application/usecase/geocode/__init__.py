"""Geocoding use cases."""

from .reverse_geocode import ReverseGeocodeRequest, ReverseGeocodeUseCase
from .search_places import SearchPlacesResponse, SearchPlacesUseCase

__all__ = [
    "ReverseGeocodeRequest",
    "ReverseGeocodeUseCase",
    "SearchPlacesResponse",
    "SearchPlacesUseCase",
]
