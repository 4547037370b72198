"""In-memory issue store for testing.

Holds raw documents (not domain models) so reads go through the same
normalizer as the real store, and doubles as the change stream.
"""

import asyncio
import copy
from collections.abc import AsyncIterator, Mapping
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from atlas.domain.model import Comment, Issue
from atlas.domain.repository import IssueChangeStream, IssueDocument, IssueRepository
from atlas.domain.value import CommentId, IssueId, IssueStatus
from atlas.persistence.mappers import comment_to_record, document_to_issue


class InMemoryIssueRepository(IssueRepository, IssueChangeStream):
    """In-memory implementation of IssueRepository and IssueChangeStream."""

    def __init__(self) -> None:
        self._documents: Dict[str, Dict[str, Any]] = {}
        self._version = 0
        self._changed = asyncio.Condition()

    async def _notify(self) -> None:
        async with self._changed:
            self._version += 1
            self._changed.notify_all()

    def _snapshot(self) -> List[IssueDocument]:
        epoch = datetime.min.replace(tzinfo=timezone.utc)

        def reported_at(item: tuple[str, Dict[str, Any]]) -> datetime:
            value = item[1].get("reported_at")
            return value if isinstance(value, datetime) else epoch

        ordered = sorted(self._documents.items(), key=reported_at, reverse=True)
        return [IssueDocument(id=k, data=copy.deepcopy(v)) for k, v in ordered]

    async def put_document(self, issue_id: str, data: Mapping[str, Any]) -> None:
        """Store a raw document as-is (used to seed legacy or partial records)."""
        self._documents[issue_id] = dict(data)
        await self._notify()

    async def find_by_id(self, issue_id: IssueId) -> Optional[Issue]:
        """Find an issue by ID."""
        data = self._documents.get(issue_id)
        if data is None:
            return None
        return document_to_issue(IssueDocument(id=issue_id, data=data))

    async def find_all(self) -> List[Issue]:
        """Find all issues, newest first."""
        return [document_to_issue(document) for document in self._snapshot()]

    async def add(self, data: Mapping[str, Any]) -> IssueId:
        """Insert a new document, stamping ``reported_at`` if absent."""
        issue_id = IssueId(str(uuid4()))
        document = dict(data)
        document.setdefault("reported_at", datetime.now(timezone.utc))
        self._documents[issue_id] = document
        await self._notify()
        return issue_id

    async def set_upvotes(self, issue_id: IssueId, upvotes: int) -> bool:
        """Overwrite the stored upvote count."""
        document = self._documents.get(issue_id)
        if document is None:
            return False
        document["upvotes"] = upvotes
        await self._notify()
        return True

    async def set_status(self, issue_id: IssueId, status: IssueStatus) -> bool:
        """Overwrite the issue status."""
        document = self._documents.get(issue_id)
        if document is None:
            return False
        document["status"] = status.value
        await self._notify()
        return True

    async def delete(self, issue_id: IssueId) -> bool:
        """Delete an issue."""
        if self._documents.pop(issue_id, None) is None:
            return False
        await self._notify()
        return True

    async def append_comment(self, issue_id: IssueId, comment: Comment) -> bool:
        """Append a comment to the embedded list."""
        document = self._documents.get(issue_id)
        if document is None:
            return False
        comments = list(document.get("comments") or [])
        comments.append(comment_to_record(comment))
        document["comments"] = comments
        await self._notify()
        return True

    async def remove_comment(self, issue_id: IssueId, comment_id: CommentId) -> bool:
        """Remove the comment with this ID."""
        document = self._documents.get(issue_id)
        if document is None:
            return False
        comments = list(document.get("comments") or [])
        remaining = [c for c in comments if c.get("id") != comment_id]
        if len(remaining) == len(comments):
            return False
        document["comments"] = remaining
        await self._notify()
        return True

    async def watch(self) -> AsyncIterator[List[IssueDocument]]:
        """Yield the current collection, then again after every mutation."""
        seen = -1
        while True:
            async with self._changed:
                await self._changed.wait_for(lambda: self._version != seen)
                seen = self._version
                snapshot = self._snapshot()
            yield snapshot
