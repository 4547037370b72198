"""Issue repository interfaces."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Mapping
from typing import Any, List, NamedTuple, Optional

from atlas.domain.model import Comment, Issue
from atlas.domain.value import CommentId, IssueId, IssueStatus


class IssueDocument(NamedTuple):
    """A persisted issue record exactly as the store holds it.

    ``data`` is untrusted: fields may be missing or carry provider-specific
    types, and must go through the normalizer before use.
    """

    id: str
    data: Mapping[str, Any]


class IssueRepository(ABC):
    """Repository for the Issue aggregate.

    Defines the contract for issue persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, issue_id: IssueId) -> Optional[Issue]:
        """Find an issue by ID.

        Args:
            issue_id: The issue's unique identifier

        Returns:
            The issue if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all(self) -> List[Issue]:
        """Find all issues ordered by report time, newest first.

        Returns:
            List of issues
        """
        pass

    @abstractmethod
    async def add(self, data: Mapping[str, Any]) -> IssueId:
        """Insert a new issue document.

        The store assigns the identifier and, when ``reported_at`` is
        absent, the report timestamp.

        Args:
            data: Issue document fields

        Returns:
            The assigned issue ID
        """
        pass

    @abstractmethod
    async def set_upvotes(self, issue_id: IssueId, upvotes: int) -> bool:
        """Overwrite the stored upvote count.

        Args:
            issue_id: The issue ID
            upvotes: New count

        Returns:
            True if the issue exists, False otherwise
        """
        pass

    @abstractmethod
    async def set_status(self, issue_id: IssueId, status: IssueStatus) -> bool:
        """Overwrite the issue status.

        Args:
            issue_id: The issue ID
            status: New status

        Returns:
            True if the issue exists, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, issue_id: IssueId) -> bool:
        """Delete an issue and its comments.

        Args:
            issue_id: The issue ID

        Returns:
            True if an issue was deleted, False if none existed
        """
        pass

    @abstractmethod
    async def append_comment(self, issue_id: IssueId, comment: Comment) -> bool:
        """Atomically append a comment to an issue.

        Args:
            issue_id: The issue ID
            comment: Comment to append

        Returns:
            True if the issue exists, False otherwise
        """
        pass

    @abstractmethod
    async def remove_comment(self, issue_id: IssueId, comment_id: CommentId) -> bool:
        """Atomically remove a comment by its identifier.

        Args:
            issue_id: The issue ID
            comment_id: The comment ID

        Returns:
            True if a comment was removed, False if it did not exist
        """
        pass


class IssueChangeStream(ABC):
    """Snapshot subscription over the whole issue collection."""

    @abstractmethod
    def watch(self) -> AsyncIterator[List[IssueDocument]]:
        """Yield the full collection on subscription and after every change.

        Snapshots are ordered by report time, newest first. Iteration only
        ends when the consumer stops; transport failures are raised from
        the iterator.

        Returns:
            Async iterator of raw document snapshots
        """
        pass
