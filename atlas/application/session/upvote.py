"""Optimistic upvotes.

The upvote is shown as applied before the write lands; a failed write is
rolled back and reported to the user exactly once. Which issues a user has
already supported is tracked in a per-user ledger kept in the key-value
store. The ledger is advisory: the stored count itself has no per-user
uniqueness.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Optional, Set

import logfire

from atlas.domain.error import AuthenticationRequiredError
from atlas.domain.repository import KeyValueStore
from atlas.domain.value import IssueId, UserId

from .notification import Notifier
from .session_store import SessionStore

UPVOTE_LEDGER_PREFIX = "upvotedIssues"

UpvoteWriter = Callable[[IssueId, int], Awaitable[None]]


def ledger_key(user_id: str) -> str:
    """Storage key of a user's ledger."""
    return f"{UPVOTE_LEDGER_PREFIX}_{user_id}"


class UpvoteOutcome(str, Enum):
    """Result of an upvote attempt."""

    APPLIED = "applied"
    ALREADY_UPVOTED = "already_upvoted"
    FAILED = "failed"


class UpvoteLedger:
    """Issues a user has upvoted, persisted as a JSON array."""

    def __init__(
        self, store: KeyValueStore, user_id: UserId, issue_ids: Optional[Set[str]] = None
    ) -> None:
        self.store = store
        self.user_id = user_id
        self.issue_ids: Set[str] = set(issue_ids or ())

    @classmethod
    async def load(cls, store: KeyValueStore, user_id: UserId) -> "UpvoteLedger":
        """Read a user's ledger; unreadable values count as empty."""
        raw = await store.get(ledger_key(user_id))
        issue_ids: Set[str] = set()
        if raw:
            try:
                parsed = json.loads(raw)
                if not isinstance(parsed, list):
                    raise ValueError("ledger must be a JSON array")
                issue_ids = {str(item) for item in parsed}
            except ValueError as e:
                logfire.warn("Ignoring unreadable upvote ledger", user_id=user_id, error=str(e))
        return cls(store, user_id, issue_ids)

    def __contains__(self, issue_id: object) -> bool:
        return issue_id in self.issue_ids

    def add(self, issue_id: str) -> None:
        self.issue_ids.add(issue_id)

    def discard(self, issue_id: str) -> None:
        self.issue_ids.discard(issue_id)

    async def save(self) -> None:
        """Persist the ledger (sorted for stable output)."""
        await self.store.set(ledger_key(self.user_id), json.dumps(sorted(self.issue_ids)))


class UpvoteReconciler:
    """Applies upvotes optimistically and reconciles them with the store."""

    def __init__(
        self,
        session_store: SessionStore,
        ledger_store: KeyValueStore,
        writer: UpvoteWriter,
        notifier: Notifier,
        login_path: str = "/login",
    ) -> None:
        """Initialize the reconciler.

        Args:
            session_store: Holds the signed-in user
            ledger_store: Key-value store holding upvote ledgers
            writer: Persists a new upvote count for an issue
            notifier: Channel for user-facing errors
            login_path: Where signed-out users are sent
        """
        self.session_store = session_store
        self.ledger_store = ledger_store
        self.writer = writer
        self.notifier = notifier
        self.login_path = login_path
        self._ledger: Optional[UpvoteLedger] = None
        self._load_lock = asyncio.Lock()

    async def ledger(self) -> Optional[UpvoteLedger]:
        """Ledger of the signed-in user, loaded once per user."""
        user = self.session_store.user
        if user is None:
            return None
        async with self._load_lock:
            if self._ledger is None or self._ledger.user_id != user.uid:
                self._ledger = await UpvoteLedger.load(self.ledger_store, user.uid)
        return self._ledger

    async def upvote(self, issue_id: IssueId, current_count: int) -> UpvoteOutcome:
        """Upvote an issue on behalf of the signed-in user.

        Args:
            issue_id: Issue to support
            current_count: Upvote count as last seen by the user

        Returns:
            What happened

        Raises:
            AuthenticationRequiredError: If nobody is signed in
        """
        ledger = await self.ledger()
        if ledger is None:
            await self.notifier.error(
                "Acesso Negado",
                "Você precisa estar logado para apoiar uma ocorrência.",
            )
            raise AuthenticationRequiredError("upvote an issue", redirect_to=self.login_path)

        if issue_id in ledger:
            return UpvoteOutcome.ALREADY_UPVOTED

        with logfire.span(
            "upvote_reconciler.upvote", issue_id=issue_id, user_id=ledger.user_id
        ):
            ledger.add(issue_id)
            try:
                await self.writer(issue_id, current_count + 1)
            except Exception as e:
                ledger.discard(issue_id)
                logfire.error("Upvote failed, rolled back", issue_id=issue_id, error=str(e))
                await self.notifier.error(
                    "Erro ao apoiar",
                    "Não foi possível registrar seu apoio. Tente novamente.",
                )
                return UpvoteOutcome.FAILED

            try:
                await ledger.save()
            except Exception as e:
                logfire.error("Upvote ledger not saved", user_id=ledger.user_id, error=str(e))
            logfire.info("Upvote applied", issue_id=issue_id, upvotes=current_count + 1)
            return UpvoteOutcome.APPLIED
