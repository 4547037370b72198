"""PostgreSQL implementation of Issue repository."""

from collections import defaultdict
from collections.abc import Mapping
from typing import Any, Dict, List, Optional
from uuid import uuid4

import logfire
from sqlalchemy import delete, desc, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from atlas.domain.model import Comment, Issue
from atlas.domain.repository import IssueDocument, IssueRepository
from atlas.domain.value import CommentId, IssueId, IssueStatus
from atlas.persistence.mappers import (
    comment_to_record,
    document_to_issue,
    document_to_issue_row,
    rows_to_issue_document,
)
from atlas.persistence.tables import comments_table, issues_table


async def fetch_issue_documents(
    session: AsyncSession, issue_ids: Optional[List[str]] = None
) -> List[IssueDocument]:
    """Load issue documents with their comments, newest report first.

    Shared by the repository and the change stream so both hand the
    normalizer exactly the same shape.

    Args:
        session: SQLAlchemy async session
        issue_ids: Restrict to these issues (all issues when None)

    Returns:
        Raw issue documents
    """
    stmt = select(issues_table).order_by(desc(issues_table.c.reported_at))
    if issue_ids is not None:
        stmt = stmt.where(issues_table.c.id.in_(issue_ids))
    result = await session.execute(stmt)
    rows = [dict(row) for row in result.mappings().all()]
    if not rows:
        return []

    comment_stmt = select(comments_table).where(
        comments_table.c.issue_id.in_([row["id"] for row in rows])
    )
    comment_result = await session.execute(comment_stmt)

    # Build lookup: issue_id -> [comment rows]
    comment_map: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    for comment_row in comment_result.mappings().all():
        comment_map[comment_row["issue_id"]].append(dict(comment_row))

    return [rows_to_issue_document(row, comment_map.get(row["id"], [])) for row in rows]


class PostgresIssueRepository(IssueRepository):
    """PostgreSQL implementation of IssueRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _touch(self, issue_id: IssueId, **values: Any) -> bool:
        """Update issue columns and bump ``changed_at``."""
        stmt = (
            update(issues_table)
            .where(issues_table.c.id == issue_id)
            .values(changed_at=func.clock_timestamp(), **values)
            .returning(issues_table.c.id)
        )
        result = await self.session.execute(stmt)
        return result.fetchone() is not None

    async def find_by_id(self, issue_id: IssueId) -> Optional[Issue]:
        """Find an issue by ID."""
        with logfire.span("issue_repository.find_by_id", issue_id=issue_id):
            documents = await fetch_issue_documents(self.session, [issue_id])
            if not documents:
                logfire.warn("Issue not found", issue_id=issue_id)
                return None
            return document_to_issue(documents[0])

    async def find_all(self) -> List[Issue]:
        """Find all issues, newest first."""
        with logfire.span("issue_repository.find_all"):
            documents = await fetch_issue_documents(self.session)
            return [document_to_issue(document) for document in documents]

    async def add(self, data: Mapping[str, Any]) -> IssueId:
        """Insert a new issue; the database assigns ``reported_at`` if absent."""
        issue_id = IssueId(str(uuid4()))
        with logfire.span("issue_repository.add", issue_id=issue_id):
            row = document_to_issue_row(data)
            stmt = insert(issues_table).values(id=issue_id, **row)
            await self.session.execute(stmt)
            await self.session.flush()
            return issue_id

    async def set_upvotes(self, issue_id: IssueId, upvotes: int) -> bool:
        """Overwrite the stored upvote count."""
        with logfire.span(
            "issue_repository.set_upvotes", issue_id=issue_id, upvotes=upvotes
        ):
            return await self._touch(issue_id, upvotes=upvotes)

    async def set_status(self, issue_id: IssueId, status: IssueStatus) -> bool:
        """Overwrite the issue status."""
        with logfire.span(
            "issue_repository.set_status", issue_id=issue_id, status=status.value
        ):
            return await self._touch(issue_id, status=status.value)

    async def delete(self, issue_id: IssueId) -> bool:
        """Delete an issue; comments go with it (ON DELETE CASCADE)."""
        with logfire.span("issue_repository.delete", issue_id=issue_id):
            stmt = (
                delete(issues_table)
                .where(issues_table.c.id == issue_id)
                .returning(issues_table.c.id)
            )
            result = await self.session.execute(stmt)
            return result.fetchone() is not None

    async def append_comment(self, issue_id: IssueId, comment: Comment) -> bool:
        """Insert a comment row and bump the parent's ``changed_at``."""
        with logfire.span(
            "issue_repository.append_comment",
            issue_id=issue_id,
            comment_id=comment.id,
        ):
            if not await self._touch(issue_id):
                return False
            stmt = insert(comments_table).values(
                issue_id=issue_id, **comment_to_record(comment)
            )
            await self.session.execute(stmt)
            await self.session.flush()
            return True

    async def remove_comment(self, issue_id: IssueId, comment_id: CommentId) -> bool:
        """Delete exactly the comment with this ID."""
        with logfire.span(
            "issue_repository.remove_comment",
            issue_id=issue_id,
            comment_id=comment_id,
        ):
            stmt = (
                delete(comments_table)
                .where(comments_table.c.issue_id == issue_id)
                .where(comments_table.c.id == comment_id)
                .returning(comments_table.c.id)
            )
            result = await self.session.execute(stmt)
            removed = result.fetchone() is not None
            if removed:
                await self._touch(issue_id)
            return removed
