"""Upvote issue use case."""

from typing import Optional

from pydantic import BaseModel

from atlas.application.session import (
    CollectingNotifier,
    Notification,
    SessionStore,
    UpvoteOutcome,
    UpvoteReconciler,
)
from atlas.config import AuthSettings
from atlas.domain.repository import KeyValueStore, UnitOfWork
from atlas.domain.service import IssueService, UserService
from atlas.domain.value import IssueId, UserId


class UpvoteIssueRequest(BaseModel):
    """Upvote issue request."""

    issue_id: str
    user_id: Optional[str] = None  # User ID from authenticated user
    current_upvotes: Optional[int] = None  # Count as shown to the user


class UpvoteIssueResponse(BaseModel):
    """Upvote issue response."""

    issue_id: str
    outcome: UpvoteOutcome
    upvotes: int
    upvoted_issue_ids: list[str]
    notifications: list[Notification]


class UpvoteIssueUseCase:
    """Use case for supporting an issue with one upvote."""

    def __init__(
        self,
        issue_service: IssueService,
        user_service: UserService,
        key_value_store: KeyValueStore,
        unit_of_work: UnitOfWork,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize upvote issue use case.

        Args:
            issue_service: Issue domain service
            user_service: User domain service
            key_value_store: Holds upvote ledgers
            unit_of_work: Commits the new count before the ledger is saved
            auth_settings: Authentication settings (login path)
        """
        self.issue_service = issue_service
        self.user_service = user_service
        self.key_value_store = key_value_store
        self.unit_of_work = unit_of_work
        self.auth_settings = auth_settings

    async def _write_upvotes(self, issue_id: IssueId, count: int) -> None:
        # Committed here, not at request teardown, so a refused commit
        # reaches the reconciler and rolls the ledger back
        await self.issue_service.set_upvotes(issue_id, count)
        await self.unit_of_work.commit()

    async def execute(self, request: UpvoteIssueRequest) -> UpvoteIssueResponse:
        """Execute the optimistic upvote flow.

        When the caller does not send the count it saw, the stored count is
        used.

        Raises:
            AuthenticationRequiredError: If nobody is signed in
            NotFoundError: If the issue does not exist
        """
        user = (
            await self.user_service.get_by_id(UserId(request.user_id))
            if request.user_id
            else None
        )
        issue_id = IssueId(request.issue_id)
        current = request.current_upvotes
        if current is None:
            current = (await self.issue_service.get_issue(issue_id)).upvotes

        notifier = CollectingNotifier()
        reconciler = UpvoteReconciler(
            session_store=SessionStore(user),
            ledger_store=self.key_value_store,
            writer=self._write_upvotes,
            notifier=notifier,
            login_path=self.auth_settings.login_path,
        )
        outcome = await reconciler.upvote(issue_id, current)
        ledger = await reconciler.ledger()

        return UpvoteIssueResponse(
            issue_id=issue_id,
            outcome=outcome,
            upvotes=current + 1 if outcome == UpvoteOutcome.APPLIED else current,
            upvoted_issue_ids=sorted(ledger.issue_ids) if ledger else [],
            notifications=notifier.notifications,
        )
