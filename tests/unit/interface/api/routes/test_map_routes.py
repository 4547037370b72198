"""Unit tests for the map and geocoding routes."""

import pytest
from fastapi.testclient import TestClient

from atlas.adapter.geocoding import MockMapboxGeocodingClient
from atlas.domain.value import GeocodeResult, GeoPoint
from atlas.interface.api.app import create_app
from atlas.persistence.repository.inmemory import InMemoryIssueRepository
from tests.conftest import raw_issue
from tests.di import build_test_container

WHOLE_WORLD = {"west": -180, "south": -85, "east": 180, "north": 85}


@pytest.fixture
def client():
    """Test client backed by a container with mock providers."""
    app = create_app(build_test_container())
    with TestClient(app) as client:
        yield client


def _resolve(client, dependency):
    container = client.app.state.dishka_container
    return client.portal.call(container.get, dependency)


def _seed_cluster(client):
    store = _resolve(client, InMemoryIssueRepository)
    for issue_id, longitude in (("a", -48.0), ("b", -47.999)):
        client.portal.call(
            store.put_document,
            issue_id,
            raw_issue(location={"latitude": -16.0, "longitude": longitude}),
        )
    client.portal.call(
        store.put_document,
        "c",
        raw_issue(
            category="Iluminação pública",
            location={"latitude": -23.5, "longitude": -46.6},
        ),
    )


class TestMarkers:
    """Tests for GET /map/markers."""

    def test_nearby_issues_are_clustered(self, client):
        _seed_cluster(client)

        response = client.get("/map/markers", params={**WHOLE_WORLD, "zoom": 10})

        assert response.status_code == 200
        markers = response.json()["markers"]
        clusters = [m for m in markers if m["kind"] == "cluster"]
        singles = [m for m in markers if m["kind"] == "issue"]
        assert [c["point_count"] for c in clusters] == [2]
        assert [s["issue"]["id"] for s in singles] == ["c"]

    def test_category_filter(self, client):
        _seed_cluster(client)

        response = client.get(
            "/map/markers",
            params={**WHOLE_WORLD, "zoom": 10, "category": "Iluminação pública"},
        )

        markers = response.json()["markers"]
        assert [m["issue"]["id"] for m in markers] == ["c"]

    def test_inverted_bounds_are_rejected(self, client):
        response = client.get(
            "/map/markers",
            params={"west": -48, "south": -15, "east": -47, "north": -16, "zoom": 10},
        )

        assert response.status_code == 400

    def test_expand_cluster(self, client):
        _seed_cluster(client)
        markers = client.get("/map/markers", params={**WHOLE_WORLD, "zoom": 10}).json()
        cluster = next(m for m in markers["markers"] if m["kind"] == "cluster")

        response = client.get(f"/map/clusters/{cluster['cluster_id']}/expansion")

        assert response.status_code == 200
        camera = response.json()
        assert 10 < camera["zoom"] <= 20
        assert camera["duration_ms"] == 800

    def test_expand_unknown_cluster(self, client):
        response = client.get("/map/clusters/42/expansion")

        assert response.status_code == 404


class TestGeocodeRoutes:
    """Tests for the geocoding routes."""

    def test_reverse_geocode(self, client):
        geocoder = _resolve(client, MockMapboxGeocodingClient)
        geocoder.addresses[(-16.0036, -47.9872)] = "Quadra 1, Santa Maria - DF"

        response = client.get(
            "/geocode/reverse", params={"latitude": -16.0036, "longitude": -47.9872}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["address"] == "Quadra 1, Santa Maria - DF"
        assert data["camera"]["zoom"] == 16

    def test_reverse_geocode_failure_falls_back_to_coordinates(self, client):
        geocoder = _resolve(client, MockMapboxGeocodingClient)
        geocoder.fail = True

        response = client.get(
            "/geocode/reverse", params={"latitude": -16.0036, "longitude": -47.9872}
        )

        assert response.status_code == 200
        assert response.json()["address"] == "-16.00360, -47.98720"

    def test_search(self, client):
        geocoder = _resolve(client, MockMapboxGeocodingClient)
        geocoder.places = [
            GeocodeResult(
                point=GeoPoint(latitude=-16.0, longitude=-48.0),
                label="Santa Maria, Brasília - DF",
            )
        ]

        response = client.get("/geocode/search", params={"q": "santa"})

        assert response.status_code == 200
        assert [r["label"] for r in response.json()["results"]] == [
            "Santa Maria, Brasília - DF"
        ]
