"""Unit tests for the session and user routes."""

import pytest
from fastapi.testclient import TestClient

from atlas.interface.api.app import create_app
from tests.di import build_test_container


@pytest.fixture
def client():
    """Test client backed by a container with mock providers."""
    app = create_app(build_test_container())
    with TestClient(app) as client:
        yield client


class TestHealth:
    """Tests for the health check."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestSignIn:
    """Tests for POST /session."""

    def test_first_sign_in_shows_tutorial(self, client):
        # Act
        response = client.post("/session", json={"token": "token-maria"})

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["uid"] == "maria"
        assert data["user"]["name"] == "Maria Souza"
        assert data["is_admin"] is False
        assert data["show_tutorial"] is True
        assert data["cancelled"] is False

    def test_tutorial_is_shown_once(self, client):
        client.post("/session", json={"token": "token-maria"})

        completed = client.post(
            "/session/tutorial", headers={"Authorization": "Bearer token-maria"}
        )
        again = client.post("/session", json={"token": "token-maria"})

        assert completed.json() == {"tutorial_completed": True}
        assert again.json()["show_tutorial"] is False

    def test_cancelled_sign_in(self, client):
        response = client.post("/session", json={"token": "cancelled"})

        assert response.status_code == 200
        assert response.json()["cancelled"] is True
        assert response.json()["user"] is None

    def test_rejected_token(self, client):
        response = client.post("/session", json={"token": "bogus"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"


class TestCurrentUser:
    """Tests for GET /session/me and GET /users/me/upvotes."""

    def test_me(self, client):
        response = client.get("/session/me", headers={"Authorization": "Bearer token-joao"})

        assert response.status_code == 200
        assert response.json()["uid"] == "joao"
        assert response.json()["name"] == "joao"

    def test_me_requires_authentication(self, client):
        response = client.get("/session/me")

        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required to view your profile"

    def test_upvotes_start_empty(self, client):
        response = client.get(
            "/users/me/upvotes", headers={"Authorization": "Bearer token-maria"}
        )

        assert response.status_code == 200
        assert response.json() == {"issue_ids": []}
