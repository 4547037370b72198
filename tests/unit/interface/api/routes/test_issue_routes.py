"""Unit tests for the issue routes."""

import pytest
from fastapi.testclient import TestClient

from atlas.domain.value import UserRole
from atlas.interface.api.app import create_app
from atlas.persistence.repository.inmemory import (
    InMemoryIssueRepository,
    InMemoryUserRepository,
)
from tests.conftest import make_user, raw_issue
from tests.di import build_test_container

MARIA = {"Authorization": "Bearer token-maria"}
ADMIN = {"Authorization": "Bearer token-admin"}

REPORT = {
    "title": "Buraco na via",
    "description": "Buraco grande perto da escola",
    "category": "Calçadas / Acessibilidade",
    "latitude": -16.0102,
    "longitude": -47.9931,
    "address": "Quadra 5, Santa Maria - DF",
}


@pytest.fixture
def client():
    """Test client backed by a container with mock providers."""
    app = create_app(build_test_container())
    with TestClient(app) as client:
        yield client


def _resolve(client, dependency):
    container = client.app.state.dishka_container
    return client.portal.call(container.get, dependency)


def _seed_issue(client, issue_id="a", **overrides):
    store = _resolve(client, InMemoryIssueRepository)
    client.portal.call(store.put_document, issue_id, raw_issue(**overrides))


def _make_admin(client):
    users = _resolve(client, InMemoryUserRepository)
    client.portal.call(
        users.save, make_user("admin", role=UserRole.ADMIN, name="Administração")
    )


class TestReportIssue:
    """Tests for POST /issues."""

    def test_report_issue(self, client):
        # Act
        response = client.post("/issues", json=REPORT, headers=MARIA)

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "Received"
        assert data["upvotes"] == 0
        assert data["reporter"] == "Maria Souza"
        assert data["reporter_id"] == "maria"
        assert data["image_url"].startswith("https://placehold.co/600x400.png?text=")

        listed = client.get("/issues").json()
        assert [i["id"] for i in listed["issues"]] == [data["id"]]

    def test_report_requires_authentication(self, client):
        response = client.post("/issues", json=REPORT)

        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required to report an issue"

    def test_report_with_invalid_token(self, client):
        response = client.post(
            "/issues", json=REPORT, headers={"Authorization": "Bearer forged"}
        )

        assert response.status_code == 401

    def test_blank_title_is_rejected(self, client):
        response = client.post("/issues", json={**REPORT, "title": "   "}, headers=MARIA)

        assert response.status_code == 400
        assert client.get("/issues").json()["total"] == 0


class TestReadIssues:
    """Tests for listing and fetching issues."""

    def test_list_filters_by_category(self, client):
        _seed_issue(client, "a", category="Iluminação pública")
        _seed_issue(client, "b", category="Outros")

        response = client.get("/issues", params={"category": ["Outros"]})

        assert response.status_code == 200
        assert [i["id"] for i in response.json()["issues"]] == ["b"]

    def test_categories(self, client):
        _seed_issue(client, "a", category="Iluminação pública")
        _seed_issue(client, "b", category="Iluminação pública")

        response = client.get("/issues/categories")

        assert response.json() == {"categories": ["Iluminação pública"]}

    def test_get_issue_normalizes_legacy_status(self, client):
        _seed_issue(client, "a", status="Em análise")

        response = client.get("/issues/a")

        assert response.status_code == 200
        assert response.json()["status"] == "UnderReview"

    def test_get_missing_issue(self, client):
        assert client.get("/issues/missing").status_code == 404


class TestTriageRoutes:
    """Tests for admin-only routes."""

    def test_admin_updates_status(self, client):
        _make_admin(client)
        _seed_issue(client, "a")

        response = client.patch("/issues/a/status", json={"status": "Resolved"}, headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["status"] == "Resolved"

    def test_regular_user_is_forbidden(self, client):
        _seed_issue(client, "a")

        response = client.patch("/issues/a/status", json={"status": "Resolved"}, headers=MARIA)

        assert response.status_code == 403
        assert client.get("/issues/a").json()["status"] == "Received"

    def test_admin_deletes_issue(self, client):
        _make_admin(client)
        _seed_issue(client, "a")

        response = client.delete("/issues/a", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get("/issues/a").status_code == 404


class TestUpvoteRoute:
    """Tests for POST /issues/{id}/upvote."""

    def test_upvote_increments_once(self, client):
        _seed_issue(client, "a", upvotes=3)

        first = client.post("/issues/a/upvote", json={"current_upvotes": 3}, headers=MARIA)
        second = client.post("/issues/a/upvote", headers=MARIA)

        assert first.status_code == 200
        assert first.json()["outcome"] == "applied"
        assert first.json()["upvotes"] == 4
        assert second.json()["outcome"] == "already_upvoted"
        assert client.get("/issues/a").json()["upvotes"] == 4
        assert client.get("/users/me/upvotes", headers=MARIA).json() == {"issue_ids": ["a"]}

    def test_signed_out_upvote_redirects_to_login(self, client):
        _seed_issue(client, "a", upvotes=3)

        response = client.post("/issues/a/upvote")

        assert response.status_code == 401
        assert response.json()["detail"]["redirect_to"] == "/login"
        assert client.get("/issues/a").json()["upvotes"] == 3


class TestCommentRoutes:
    """Tests for comment routes."""

    def test_comment_and_admin_delete(self, client):
        # Arrange
        _make_admin(client)
        _seed_issue(client, "a")

        # Act
        created = client.post(
            "/issues/a/comments", json={"content": "Aqui também"}, headers=MARIA
        )
        comment_id = created.json()["id"]
        deleted = client.delete(f"/issues/a/comments/{comment_id}", headers=ADMIN)
        missing = client.delete(f"/issues/a/comments/{comment_id}", headers=ADMIN)

        # Assert
        assert created.status_code == 201
        assert created.json()["author"] == "Maria Souza"
        assert created.json()["author_role"] == "user"
        assert deleted.json() == {"success": True, "message": "Comment deleted"}
        assert missing.json()["success"] is False
        assert client.get("/issues/a").json()["comments"] == []

    def test_blank_comment(self, client):
        _seed_issue(client, "a")

        response = client.post("/issues/a/comments", json={"content": " "}, headers=MARIA)

        assert response.status_code == 400

    def test_comment_on_missing_issue(self, client):
        response = client.post(
            "/issues/missing/comments", json={"content": "oi"}, headers=MARIA
        )

        assert response.status_code == 404

    def test_regular_user_cannot_delete_comment(self, client):
        _seed_issue(client, "a")
        created = client.post("/issues/a/comments", json={"content": "oi"}, headers=MARIA)

        response = client.delete(
            f"/issues/a/comments/{created.json()['id']}", headers=MARIA
        )

        assert response.status_code == 403
