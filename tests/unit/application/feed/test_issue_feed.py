"""Unit tests for the live issue feed."""

import asyncio
from typing import List

import pytest

from atlas.application.feed import IssueFeed, normalize_snapshot
from atlas.config import FeedSettings
from atlas.domain.repository import IssueChangeStream, IssueDocument
from atlas.persistence.repository.inmemory import InMemoryIssueRepository
from tests.conftest import raw_issue


class FlakyChangeStream(IssueChangeStream):
    """Change stream that fails a fixed number of times before serving."""

    def __init__(self, failures: int, snapshot: List[IssueDocument]):
        self.failures = failures
        self.snapshot = snapshot
        self.watches = 0

    async def watch(self):
        self.watches += 1
        if self.watches <= self.failures:
            raise ConnectionError("stream dropped")
        yield self.snapshot
        await asyncio.Event().wait()


class RecordingSleep:
    """Records requested backoff delays without waiting."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


async def _next(queue: asyncio.Queue):
    return await asyncio.wait_for(queue.get(), timeout=2)


class TestNormalizeSnapshot:
    """Tests for snapshot normalization."""

    def test_malformed_documents_are_skipped(self):
        """A document without a location should be dropped, others kept in order."""
        broken = raw_issue()
        broken.pop("location")
        documents = [
            IssueDocument(id="a", data=raw_issue(title="A")),
            IssueDocument(id="b", data=broken),
            IssueDocument(id="c", data=raw_issue(title="C")),
        ]

        issues = normalize_snapshot(documents)

        assert [issue.id for issue in issues] == ["a", "c"]


class TestIssueFeed:
    """Tests for IssueFeed subscriptions."""

    @pytest.mark.asyncio
    async def test_delivers_initial_and_changed_snapshots(self):
        """Subscribing should deliver the current collection, then every change."""
        # Arrange
        store = InMemoryIssueRepository()
        await store.put_document("old", raw_issue(title="Antigo"))
        feed = IssueFeed(store, FeedSettings())
        received: asyncio.Queue = asyncio.Queue()

        # Act
        subscription = feed.subscribe(received.put_nowait)
        first = await _next(received)
        await store.put_document("new", raw_issue(title="Novo"))
        second = await _next(received)
        subscription.cancel()

        # Assert
        assert [issue.id for issue in first] == ["old"]
        assert {issue.id for issue in second} == {"old", "new"}

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent_and_stops_delivery(self):
        """Cancelling twice is harmless and no snapshot arrives afterwards."""
        store = InMemoryIssueRepository()
        feed = IssueFeed(store, FeedSettings())
        received: asyncio.Queue = asyncio.Queue()
        subscription = feed.subscribe(received.put_nowait)
        await _next(received)

        subscription.cancel()
        subscription.cancel()
        await subscription.wait()
        await store.put_document("late", raw_issue())
        await asyncio.sleep(0)

        assert subscription.cancelled
        assert not subscription.active
        assert received.empty()

    @pytest.mark.asyncio
    async def test_callback_errors_do_not_stop_the_feed(self):
        """A failing callback is logged and later snapshots still arrive."""
        store = InMemoryIssueRepository()
        feed = IssueFeed(store, FeedSettings())
        received: asyncio.Queue = asyncio.Queue()
        failed = asyncio.Event()

        async def callback(issues):
            if not failed.is_set():
                failed.set()
                raise RuntimeError("render failed")
            received.put_nowait(issues)

        subscription = feed.subscribe(callback)
        await asyncio.wait_for(failed.wait(), timeout=2)
        await store.put_document("x", raw_issue())
        issues = await _next(received)
        subscription.cancel()

        assert [issue.id for issue in issues] == ["x"]

    @pytest.mark.asyncio
    async def test_retries_with_backoff_after_stream_failure(self):
        """Transient stream failures are retried with exponential backoff."""
        # Arrange
        stream = FlakyChangeStream(
            failures=3, snapshot=[IssueDocument(id="a", data=raw_issue())]
        )
        sleep = RecordingSleep()
        settings = FeedSettings(max_retries=5, retry_base_delay=1.0, retry_max_delay=3.0)
        feed = IssueFeed(stream, settings, sleep=sleep)
        received: asyncio.Queue = asyncio.Queue()

        # Act
        subscription = feed.subscribe(received.put_nowait)
        issues = await _next(received)
        subscription.cancel()

        # Assert
        assert [issue.id for issue in issues] == ["a"]
        assert sleep.delays == [1.0, 2.0, 3.0]
        assert stream.watches == 4

    @pytest.mark.asyncio
    async def test_gives_up_and_reports_once(self):
        """After max retries the error callback fires exactly once."""
        stream = FlakyChangeStream(failures=100, snapshot=[])
        feed = IssueFeed(stream, FeedSettings(max_retries=2), sleep=RecordingSleep())
        errors: List[BaseException] = []

        subscription = feed.subscribe(lambda issues: None, errors.append)
        await asyncio.wait_for(subscription.wait(), timeout=2)

        assert len(errors) == 1
        assert isinstance(errors[0], ConnectionError)
        assert subscription.error is errors[0]
        assert not subscription.active
        assert stream.watches == 3

    def test_retry_delay_is_capped(self):
        """Backoff doubles per attempt up to the configured ceiling."""
        feed = IssueFeed(
            InMemoryIssueRepository(),
            FeedSettings(retry_base_delay=0.5, retry_max_delay=4.0),
        )

        assert [feed.retry_delay(n) for n in range(1, 6)] == [0.5, 1.0, 2.0, 4.0, 4.0]
