"""Unit tests for the live map session."""

import asyncio
from typing import Any, Callable, Dict, List, Optional

import pytest
import pytest_asyncio
from pydantic import ValidationError

from atlas.application.feed import IssueFeed
from atlas.application.session import MapSession, SessionStore, UpvoteReconciler
from atlas.config import FeedSettings, MapSettings
from atlas.domain.repository import IssueChangeStream
from atlas.persistence.repository.inmemory import (
    InMemoryIssueRepository,
    InMemoryKeyValueStore,
)
from tests.conftest import make_user, raw_issue

LIGHTING = "Iluminação pública"
WASTE = "Limpeza urbana / Acúmulo de lixo"
WORLD = {"west": -180, "south": -85, "east": 180, "north": 85}

Event = Dict[str, Any]


class EventRecorder:
    """Outbound event sink that keeps everything it was sent."""

    def __init__(self):
        self.events: List[Event] = []

    async def __call__(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> List[Event]:
        return [e for e in self.events if e["type"] == event_type]

    async def wait_for(
        self, event_type: str, predicate: Optional[Callable[[Event], bool]] = None
    ) -> Event:
        async def _poll() -> Event:
            while True:
                for event in self.of_type(event_type):
                    if predicate is None or predicate(event):
                        return event
                await asyncio.sleep(0.01)

        return await asyncio.wait_for(_poll(), timeout=2)


class BrokenChangeStream(IssueChangeStream):
    async def watch(self):
        raise ConnectionError("listener detached")
        yield []


def _issue_upvotes(event: Event, issue_id: str) -> int:
    return next(i["upvotes"] for i in event["issues"] if i["id"] == issue_id)


async def _start(store, user=None, change_stream=None, feed_settings=None):
    recorder = EventRecorder()
    session_store = SessionStore(user)
    feed = IssueFeed(change_stream or store, feed_settings or FeedSettings())

    async def write_upvotes(issue_id, count):
        await store.set_upvotes(issue_id, count)

    session = MapSession(
        feed=feed,
        session_store=session_store,
        reconciler_factory=lambda notifier: UpvoteReconciler(
            session_store, InMemoryKeyValueStore(), write_upvotes, notifier
        ),
        send=recorder,
        settings=MapSettings(),
    )
    await session.start()
    return session, recorder


@pytest_asyncio.fixture
async def store():
    store = InMemoryIssueRepository()
    await store.put_document(
        "a", raw_issue(category=LIGHTING, location={"latitude": -16.0, "longitude": -48.0})
    )
    await store.put_document(
        "b", raw_issue(category=WASTE, location={"latitude": -23.5, "longitude": -46.6})
    )
    return store


class TestMapSession:
    """Tests for MapSession."""

    @pytest.mark.asyncio
    async def test_start_sends_ledger_issues_and_markers(self, store):
        """A new viewer gets its upvotes, the issue list and markers."""
        # Act
        session, recorder = await _start(store)
        issues = await recorder.wait_for("issues")
        markers = await recorder.wait_for("markers")
        await session.close()

        # Assert
        assert recorder.events[0] == {"type": "upvotes", "issue_ids": []}
        assert sorted(i["id"] for i in issues["issues"]) == ["a", "b"]
        assert sorted(issues["categories"]) == sorted([LIGHTING, WASTE])
        assert issues["selected"] == sorted([LIGHTING, WASTE])
        assert markers["zoom"] == 13.0
        assert sorted(m["issue"]["id"] for m in markers["markers"]) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_unchanged_viewport_does_not_recluster(self, store):
        session, recorder = await _start(store)
        await recorder.wait_for("markers")

        await session.handle({"type": "viewport", "bounds": WORLD, "zoom": 13})
        await session.handle({"type": "viewport", "bounds": WORLD, "zoom": 14})
        await session.close()

        assert [e["zoom"] for e in recorder.of_type("markers")] == [13.0, 14.0]

    @pytest.mark.asyncio
    async def test_toggle_category_hides_its_markers(self, store):
        session, recorder = await _start(store)
        await recorder.wait_for("markers")

        await session.handle({"type": "toggle_category", "category": WASTE})
        await session.close()

        assert recorder.of_type("issues")[-1]["selected"] == [LIGHTING]
        latest = recorder.of_type("markers")[-1]
        assert [m["issue"]["id"] for m in latest["markers"]] == ["a"]

    @pytest.mark.asyncio
    async def test_upvote_updates_store_and_ledger(self, store):
        """An applied upvote is echoed by the feed and the ledger."""
        # Arrange
        session, recorder = await _start(store, user=make_user())
        await recorder.wait_for("markers")

        # Act
        await session.handle({"type": "upvote", "issue_id": "a"})
        updated = await recorder.wait_for(
            "issues", lambda e: _issue_upvotes(e, "a") == 4
        )
        await session.close()

        # Assert
        assert _issue_upvotes(updated, "a") == 4
        assert recorder.of_type("upvotes")[-1]["issue_ids"] == ["a"]
        assert recorder.of_type("notification") == []

    @pytest.mark.asyncio
    async def test_signed_out_upvote_redirects(self, store):
        session, recorder = await _start(store)
        await recorder.wait_for("markers")

        await session.handle({"type": "upvote", "issue_id": "a"})
        await session.close()

        assert recorder.of_type("redirect") == [{"type": "redirect", "to": "/login"}]
        assert recorder.of_type("notification")[0]["title"] == "Acesso Negado"
        assert (await store.find_by_id("a")).upvotes == 3

    @pytest.mark.asyncio
    async def test_select_issue_moves_camera(self, store):
        session, recorder = await _start(store)
        await recorder.wait_for("markers")

        await session.handle({"type": "select_issue", "issue_id": "a"})
        await session.handle({"type": "select_issue", "issue_id": "missing"})
        await session.close()

        camera = recorder.of_type("camera")[0]
        assert camera["issue_id"] == "a"
        assert camera["zoom"] == 15.0
        assert camera["center"] == {"latitude": -16.0, "longitude": -48.0}
        assert recorder.of_type("notification")[0]["title"] == "Ocorrência não encontrada"

    @pytest.mark.asyncio
    async def test_expand_cluster_flies_to_expansion_zoom(self, store):
        await store.put_document(
            "c",
            raw_issue(category=LIGHTING, location={"latitude": -16.0, "longitude": -47.999}),
        )
        session, recorder = await _start(store)
        markers = await recorder.wait_for("markers")
        cluster = next(m for m in markers["markers"] if m["kind"] == "cluster")

        await session.handle({"type": "expand_cluster", "cluster_id": cluster["cluster_id"]})
        await session.handle({"type": "expand_cluster", "cluster_id": 999_999})
        await session.close()

        cameras = recorder.of_type("camera")
        assert len(cameras) == 1
        assert 13 < cameras[0]["zoom"] <= 20
        assert cameras[0]["duration_ms"] == 800
        notifications = recorder.of_type("notification")
        assert [n["title"] for n in notifications] == ["Agrupamento desatualizado"]

    @pytest.mark.asyncio
    async def test_expand_cluster_hidden_by_filter_is_reported(self, store):
        """A cluster id from markers the viewer no longer sees is not expanded."""
        # Arrange
        await store.put_document(
            "c",
            raw_issue(category=LIGHTING, location={"latitude": -16.0, "longitude": -47.999}),
        )
        session, recorder = await _start(store)
        markers = await recorder.wait_for("markers")
        cluster = next(m for m in markers["markers"] if m["kind"] == "cluster")
        await session.handle({"type": "toggle_category", "category": LIGHTING})

        # Act
        await session.handle({"type": "expand_cluster", "cluster_id": cluster["cluster_id"]})
        await session.close()

        # Assert
        assert recorder.of_type("camera") == []
        notification = recorder.of_type("notification")[0]
        assert notification["level"] == "info"
        assert notification["title"] == "Agrupamento desatualizado"

    @pytest.mark.asyncio
    async def test_unknown_command_is_rejected(self, store):
        session, _ = await _start(store)

        with pytest.raises(ValidationError):
            await session.handle({"type": "dance"})
        with pytest.raises(ValidationError):
            await session.handle({"type": "viewport", "zoom": 3})
        await session.close()

    @pytest.mark.asyncio
    async def test_feed_failure_is_reported(self, store):
        """When the feed gives up, the viewer is told once."""
        session, recorder = await _start(
            store,
            change_stream=BrokenChangeStream(),
            feed_settings=FeedSettings(max_retries=0),
        )

        notification = await recorder.wait_for("notification")
        await session.close()
        await session.close()

        assert notification["level"] == "error"
        assert notification["title"] == "Erro ao carregar ocorrências"
        assert len(recorder.of_type("notification")) == 1
