"""Get upvoted issues use case."""

from pydantic import BaseModel

from atlas.application.session import UpvoteLedger
from atlas.domain.repository import KeyValueStore
from atlas.domain.value import UserId


class UpvotedIssuesResponse(BaseModel):
    """Issues the user has upvoted."""

    issue_ids: list[str]


class GetUpvotedIssuesUseCase:
    """Use case for reading a user's upvote ledger."""

    def __init__(self, key_value_store: KeyValueStore) -> None:
        """Initialize get upvoted issues use case.

        Args:
            key_value_store: Holds upvote ledgers
        """
        self.key_value_store = key_value_store

    async def execute(self, user_id: str) -> UpvotedIssuesResponse:
        """Read the ledger."""
        ledger = await UpvoteLedger.load(self.key_value_store, UserId(user_id))
        return UpvotedIssuesResponse(issue_ids=sorted(ledger.issue_ids))
