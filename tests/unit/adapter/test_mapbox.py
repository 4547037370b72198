"""Unit tests for the Mapbox geocoding client."""

from typing import List

import httpx
import pytest

from atlas.adapter.error import GeocodingError
from atlas.adapter.geocoding import RealMapboxGeocodingClient
from atlas.config import GeocodingSettings
from atlas.domain.value import GeoPoint

SETTINGS = GeocodingSettings(access_token="pk.test", max_retries=2, retry_base_delay=0.5)
POINT = GeoPoint(latitude=-16.0036, longitude=-47.9872)


class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _client(handler, settings: GeocodingSettings = SETTINGS, sleep=None):
    return RealMapboxGeocodingClient(
        settings,
        transport=httpx.MockTransport(handler),
        sleep=sleep or RecordingSleep(),
    )


class TestReverse:
    """Tests for reverse geocoding."""

    @pytest.mark.asyncio
    async def test_returns_best_place_name(self):
        """The request carries lng,lat order and locale parameters."""
        requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200,
                json={
                    "features": [
                        {"place_name": "Santa Maria, Brasília - DF"},
                        {"place_name": "Distrito Federal"},
                    ]
                },
            )

        address = await _client(handler).reverse(POINT)

        assert address == "Santa Maria, Brasília - DF"
        request = requests[0]
        assert request.url.path == "/geocoding/v5/mapbox.places/-47.9872,-16.0036.json"
        assert request.url.params["access_token"] == "pk.test"
        assert request.url.params["language"] == "pt-BR"
        assert request.url.params["country"] == "br"
        assert request.url.params["limit"] == "1"

    @pytest.mark.asyncio
    async def test_no_features(self):
        def handler(request):
            return httpx.Response(200, json={"features": []})

        assert await _client(handler).reverse(POINT) is None

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        def handler(request):
            return httpx.Response(401, json={"message": "Not Authorized - Invalid Token"})

        with pytest.raises(GeocodingError):
            await _client(handler).reverse(POINT)

    @pytest.mark.asyncio
    async def test_missing_token_raises_without_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"features": []})

        client = _client(handler, settings=GeocodingSettings(access_token=""))

        with pytest.raises(GeocodingError):
            await client.reverse(POINT)
        assert calls == []

    @pytest.mark.asyncio
    async def test_transport_errors_are_retried(self):
        """Connection failures are retried with backoff before succeeding."""
        # Arrange
        attempts = 0

        def handler(request):
            nonlocal attempts
            attempts += 1
            if attempts < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"features": [{"place_name": "Gama - DF"}]})

        sleep = RecordingSleep()

        # Act
        address = await _client(handler, sleep=sleep).reverse(POINT)

        # Assert
        assert address == "Gama - DF"
        assert attempts == 3
        assert sleep.delays == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        attempts = 0

        def handler(request):
            nonlocal attempts
            attempts += 1
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(GeocodingError):
            await _client(handler).reverse(POINT)
        assert attempts == 3


class TestSearch:
    """Tests for forward geocoding."""

    @pytest.mark.asyncio
    async def test_parses_ranked_results(self):
        requests: List[httpx.Request] = []

        def handler(request):
            requests.append(request)
            return httpx.Response(
                200,
                json={
                    "features": [
                        {"place_name": "Santa Maria, DF", "center": [-48.01, -16.02]},
                        {"place_name": "Sem centro"},
                        {"center": [-47.0, -15.0]},
                    ]
                },
            )

        results = await _client(handler).search("santa maria", 5)

        assert [r.label for r in results] == ["Santa Maria, DF"]
        assert results[0].point == GeoPoint(latitude=-16.02, longitude=-48.01)
        assert requests[0].url.params["autocomplete"] == "true"
        assert requests[0].url.params["limit"] == "5"
        assert requests[0].url.path.endswith("/santa maria.json")
