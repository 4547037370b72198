"""Test configuration and helpers."""

from datetime import datetime, timedelta, timezone
from typing import Any

from atlas.domain.model import AppUser, Issue
from atlas.domain.value import GeoPoint, IssueId, UserId, UserRole

BASE_TIME = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_issue(
    issue_id: str = "issue-1",
    latitude: float = -16.0036,
    longitude: float = -47.9872,
    category: str = "Iluminação pública",
    upvotes: int = 0,
    minutes_ago: int = 0,
    **overrides: Any,
) -> Issue:
    """Build an Issue with sensible defaults for tests."""
    fields: dict[str, Any] = {
        "id": IssueId(issue_id),
        "title": f"Poste apagado {issue_id}",
        "description": "Poste sem luz há uma semana",
        "category": category,
        "location": GeoPoint(latitude=latitude, longitude=longitude),
        "address": "Quadra 1, Santa Maria - DF",
        "reported_at": BASE_TIME - timedelta(minutes=minutes_ago),
        "reporter": "Maria Souza",
        "reporter_id": UserId("maria"),
        "upvotes": upvotes,
    }
    fields.update(overrides)
    return Issue(**fields)


def make_user(uid: str = "maria", role: UserRole = UserRole.USER, **overrides: Any) -> AppUser:
    """Build an AppUser with sensible defaults for tests."""
    fields: dict[str, Any] = {
        "uid": UserId(uid),
        "email": f"{uid}@example.com",
        "name": uid.capitalize(),
        "role": role,
        "created_at": BASE_TIME,
    }
    fields.update(overrides)
    return AppUser(**fields)


def raw_issue(**overrides: Any) -> dict[str, Any]:
    """A stored issue record as the store would hold it."""
    record: dict[str, Any] = {
        "title": "Lixo acumulado",
        "description": "Entulho na calçada",
        "category": "Limpeza urbana / Acúmulo de lixo",
        "status": "Received",
        "location": {"latitude": -16.01, "longitude": -47.99},
        "address": "Quadra 2, Santa Maria - DF",
        "reported_at": BASE_TIME,
        "reporter": "João",
        "reporter_id": "joao",
        "upvotes": 3,
        "comments": [],
    }
    record.update(overrides)
    return record
