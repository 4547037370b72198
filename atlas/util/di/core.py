"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from atlas.config import (
    AuthSettings,
    FeedSettings,
    GeocodingSettings,
    MapSettings,
    Settings,
    StorageSettings,
)
from atlas.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    scope = Scope.APP

    @provide
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide
    def provide_map_settings(self, settings: Settings) -> MapSettings:
        """Provide map and clustering settings."""
        return settings.map

    @provide
    def provide_feed_settings(self, settings: Settings) -> FeedSettings:
        """Provide live feed settings."""
        return settings.feed

    @provide
    def provide_geocoding_settings(self, settings: Settings) -> GeocodingSettings:
        """Provide geocoding settings."""
        return settings.geocoding

    @provide
    def provide_storage_settings(self, settings: Settings) -> StorageSettings:
        """Provide key-value storage settings."""
        return settings.storage
