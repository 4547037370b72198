"""Unit tests for startup configuration checks."""

import pytest

from atlas.config import AuthSettings, GeocodingSettings, Settings
from atlas.util.error import ConfigurationError
from atlas.util.observability import check_production_settings


class TestCheckProductionSettings:
    """Tests for check_production_settings."""

    def test_development_allows_placeholders(self):
        check_production_settings(Settings(environment="development"))

    def test_production_requires_provider_secret(self):
        settings = Settings(
            environment="production",
            geocoding=GeocodingSettings(access_token="pk.live"),
        )

        with pytest.raises(ConfigurationError, match="AUTH__PROVIDER_SECRET") as exc_info:
            check_production_settings(settings)

        assert exc_info.value.environment == "production"

    def test_production_requires_geocoding_token(self):
        settings = Settings(
            environment="production",
            auth=AuthSettings(provider_secret="real-secret"),
            geocoding=GeocodingSettings(access_token=""),
        )

        with pytest.raises(ConfigurationError, match="GEOCODING__ACCESS_TOKEN"):
            check_production_settings(settings)

    def test_production_with_credentials(self):
        settings = Settings(
            environment="production",
            host="api.atlascivico.com.br",
            auth=AuthSettings(provider_secret="real-secret"),
            geocoding=GeocodingSettings(access_token="pk.live"),
        )

        check_production_settings(settings)
        assert settings.api.base_url == "https://api.atlascivico.com.br"
