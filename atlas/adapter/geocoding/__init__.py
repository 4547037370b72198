"""Geocoding adapters."""

from .mapbox import (
    MapboxGeocodingClient,
    MockMapboxGeocodingClient,
    RealMapboxGeocodingClient,
)

__all__ = [
    "MapboxGeocodingClient",
    "MockMapboxGeocodingClient",
    "RealMapboxGeocodingClient",
]
