"""Geocoding infrastructure providers."""

from dishka import Scope, provide

from atlas.adapter.geocoding import RealMapboxGeocodingClient
from atlas.config import GeocodingSettings
from atlas.domain.service import GeocodingClient
from atlas.util.di.base import ProviderBase


class GeocodingProvider(ProviderBase):
    """Geocoding component base."""

    __mock_component__ = "geocoding"


class ProdGeocodingProvider(GeocodingProvider):
    """Production geocoding provider (Mapbox)."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_geocoding_client(self, settings: GeocodingSettings) -> GeocodingClient:
        """Provide Mapbox geocoding client.

        A missing access token is not fatal here: lookups then fail and the
        geocoding service falls back to coordinate literals.
        """
        return RealMapboxGeocodingClient(settings=settings)
