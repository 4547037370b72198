"""Live issue feed.

Turns the store's change stream into a sequence of fully normalized issue
snapshots delivered to a callback. Every snapshot is the whole collection,
never a delta.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, List, Optional

import logfire
from pydantic import ValidationError as PydanticValidationError

from atlas.config import FeedSettings
from atlas.domain.error import PersistenceError
from atlas.domain.model import Issue
from atlas.domain.repository import IssueChangeStream, IssueDocument
from atlas.persistence.mappers import document_to_issue

IssuesCallback = Callable[[List[Issue]], Any]
ErrorCallback = Callable[[BaseException], Any]
Sleep = Callable[[float], Awaitable[Any]]


async def _maybe_await(result: Any) -> None:
    if inspect.isawaitable(result):
        await result


def normalize_snapshot(documents: List[IssueDocument]) -> List[Issue]:
    """Normalize a raw snapshot, skipping documents that cannot be read.

    Args:
        documents: Raw issue documents, newest first

    Returns:
        Issues in the same order
    """
    issues: List[Issue] = []
    for document in documents:
        try:
            issues.append(document_to_issue(document))
        except (PydanticValidationError, ValueError) as e:
            logfire.warn("Skipping malformed issue", issue_id=document.id, error=str(e))
    return issues


class Subscription:
    """Handle on a running feed subscription."""

    def __init__(self) -> None:
        self._task: Optional[asyncio.Task[None]] = None
        self._cancelled = False
        self.error: Optional[BaseException] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        """Whether the subscription is still watching the store."""
        return (
            not self._cancelled
            and self.error is None
            and self._task is not None
            and not self._task.done()
        )

    def cancel(self) -> None:
        """Stop the watch. Safe to call any number of times."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        logfire.debug("Issue feed subscription cancelled")

    async def wait(self) -> None:
        """Wait until the subscription's task has finished."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            if not self._cancelled:
                raise


class IssueFeed:
    """Subscribes callbacks to normalized issue snapshots.

    Each subscription holds exactly one watch on the change stream.
    Callbacks run one at a time in snapshot order. A dropped stream is
    retried with exponential backoff; the failure count resets after every
    delivered snapshot.
    """

    def __init__(
        self,
        change_stream: IssueChangeStream,
        settings: FeedSettings,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the feed.

        Args:
            change_stream: Store change stream
            settings: Retry policy
            sleep: Awaitable used between retries
        """
        self.change_stream = change_stream
        self.settings = settings
        self._sleep = sleep

    def retry_delay(self, attempt: int) -> float:
        """Backoff before retry ``attempt`` (1-based)."""
        delay = self.settings.retry_base_delay * 2 ** (attempt - 1)
        return min(delay, self.settings.retry_max_delay)

    def subscribe(
        self, callback: IssuesCallback, on_error: Optional[ErrorCallback] = None
    ) -> Subscription:
        """Start delivering snapshots to ``callback``.

        Must be called from a running event loop.

        Args:
            callback: Receives the full, normalized issue list (sync or async)
            on_error: Called once if the feed gives up after repeated failures

        Returns:
            Subscription handle
        """
        subscription = Subscription()
        subscription._task = asyncio.get_running_loop().create_task(
            self._run(subscription, callback, on_error), name="issue-feed"
        )
        logfire.info("Issue feed subscribed")
        return subscription

    async def _deliver(
        self, subscription: Subscription, callback: IssuesCallback, issues: List[Issue]
    ) -> None:
        if subscription.cancelled:
            return
        try:
            await _maybe_await(callback(issues))
        except Exception as e:
            logfire.error("Issue feed callback failed", error=str(e))

    async def _run(
        self,
        subscription: Subscription,
        callback: IssuesCallback,
        on_error: Optional[ErrorCallback],
    ) -> None:
        attempt = 0
        while not subscription.cancelled:
            try:
                async for documents in self.change_stream.watch():
                    if subscription.cancelled:
                        return
                    issues = normalize_snapshot(documents)
                    await self._deliver(subscription, callback, issues)
                    attempt = 0
                raise PersistenceError("Issue change stream ended unexpectedly")
            except Exception as e:
                attempt += 1
                logfire.error(
                    "Issue feed stream failed",
                    error=str(e),
                    attempt=attempt,
                    max_retries=self.settings.max_retries,
                )
                if attempt > self.settings.max_retries:
                    subscription.error = e
                    logfire.error("Issue feed gave up", error=str(e))
                    if on_error is not None and not subscription.cancelled:
                        await _maybe_await(on_error(e))
                    return
                await self._sleep(self.retry_delay(attempt))
