"""Issue domain service."""

import math
from typing import List, Optional, Sequence
from urllib.parse import quote
from uuid import uuid4

import logfire
from pydantic import BaseModel

from atlas.domain.error import (
    AuthenticationRequiredError,
    NotAuthorizedError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from atlas.domain.model import AppUser, Comment, Issue
from atlas.domain.repository import IssueRepository
from atlas.domain.value import (
    ANONYMOUS_AUTHOR,
    DEFAULT_CATEGORY,
    CommentId,
    IssueId,
    IssueStatus,
)

from .base import Service
from .category_filter import filter_by_categories
from .user_service import UserService

PLACEHOLDER_IMAGE_URL = "https://placehold.co/600x400.png?text={text}"


class NewIssue(BaseModel):
    """Report form contents, validated by the service before any write."""

    title: str
    description: str
    category: Optional[str] = None
    latitude: float
    longitude: float
    address: str


def placeholder_image_url(title: str) -> str:
    """Placeholder picture carrying the issue title."""
    return PLACEHOLDER_IMAGE_URL.format(text=quote(title, safe=""))


class IssueService(Service):
    """Domain service for issue operations."""

    def __init__(
        self, issue_repository: IssueRepository, user_service: UserService
    ) -> None:
        """Initialize issue service.

        Args:
            issue_repository: Issue repository
            user_service: User domain service
        """
        self.issue_repository = issue_repository
        self.user_service = user_service

    @staticmethod
    def _require_admin(user: Optional[AppUser], action: str) -> AppUser:
        if user is None:
            raise AuthenticationRequiredError(action)
        if not user.is_admin:
            logfire.warn("Admin action refused", action=action, user_id=user.uid)
            raise NotAuthorizedError(action, user.uid)
        return user

    @staticmethod
    def _validate_new_issue(new_issue: NewIssue, reporter: AppUser) -> None:
        if not new_issue.title.strip():
            raise ValidationError("Title is required")
        if not new_issue.description.strip():
            raise ValidationError("Description is required")
        if not new_issue.address.strip():
            raise ValidationError("Address is required")
        if not reporter.uid.strip():
            raise ValidationError("Reporter is required")
        if not math.isfinite(new_issue.latitude) or not -90 <= new_issue.latitude <= 90:
            raise ValidationError("Latitude must be between -90 and 90")
        if (
            not math.isfinite(new_issue.longitude)
            or not -180 <= new_issue.longitude <= 180
        ):
            raise ValidationError("Longitude must be between -180 and 180")

    async def report_issue(
        self, new_issue: NewIssue, reporter: Optional[AppUser]
    ) -> Issue:
        """Report a new issue.

        Validation happens before anything is written. The store assigns
        the report timestamp; afterwards the reporter's counter is bumped.

        Args:
            new_issue: Report form contents
            reporter: Signed-in user

        Returns:
            The stored issue

        Raises:
            AuthenticationRequiredError: If nobody is signed in
            ValidationError: If a field is blank or coordinates are out of range
        """
        if reporter is None:
            raise AuthenticationRequiredError("report an issue")
        self._validate_new_issue(new_issue, reporter)

        title = new_issue.title.strip()
        with logfire.span("issue_service.report_issue", reporter_id=reporter.uid):
            data = {
                "title": title,
                "description": new_issue.description.strip(),
                "category": (new_issue.category or "").strip() or DEFAULT_CATEGORY,
                "status": IssueStatus.RECEIVED.value,
                "location": {
                    "latitude": new_issue.latitude,
                    "longitude": new_issue.longitude,
                },
                "address": new_issue.address.strip(),
                "image_url": placeholder_image_url(title),
                "reporter": reporter.name,
                "reporter_id": reporter.uid,
                "upvotes": 0,
                "comments": [],
            }
            issue_id = await self.issue_repository.add(data)
            await self.user_service.increment_issues_reported(reporter.uid)

            issue = await self.issue_repository.find_by_id(issue_id)
            if issue is None:
                raise PersistenceError(f"Issue {issue_id} vanished after insert")
            logfire.info(
                "Issue reported",
                issue_id=issue_id,
                category=issue.category,
                reporter_id=reporter.uid,
            )
            return issue

    async def get_issue(self, issue_id: IssueId) -> Issue:
        """Get an issue by ID.

        Raises:
            NotFoundError: If the issue does not exist
        """
        issue = await self.issue_repository.find_by_id(issue_id)
        if issue is None:
            raise NotFoundError("Issue", issue_id)
        return issue

    async def list_issues(self, categories: Sequence[str] = ()) -> List[Issue]:
        """All issues, newest first, optionally restricted to categories."""
        with logfire.span("issue_service.list_issues", categories=list(categories)):
            issues = await self.issue_repository.find_all()
            return filter_by_categories(issues, set(categories))

    async def set_upvotes(self, issue_id: IssueId, count: int) -> None:
        """Overwrite an issue's upvote count.

        Args:
            issue_id: Issue ID
            count: New count (never negative)

        Raises:
            ValidationError: If the count is negative
            NotFoundError: If the issue does not exist
        """
        if count < 0:
            raise ValidationError("Upvote count cannot be negative")
        with logfire.span("issue_service.set_upvotes", issue_id=issue_id, count=count):
            if not await self.issue_repository.set_upvotes(issue_id, count):
                raise NotFoundError("Issue", issue_id)

    async def update_status(
        self, issue_id: IssueId, status: IssueStatus, user: Optional[AppUser]
    ) -> Issue:
        """Change an issue's triage status (admins only).

        Raises:
            AuthenticationRequiredError: If nobody is signed in
            NotAuthorizedError: If the user is not an admin
            NotFoundError: If the issue does not exist
        """
        admin = self._require_admin(user, "update issue status")
        with logfire.span(
            "issue_service.update_status", issue_id=issue_id, status=status.value
        ):
            if not await self.issue_repository.set_status(issue_id, status):
                raise NotFoundError("Issue", issue_id)
            logfire.info(
                "Issue status updated",
                issue_id=issue_id,
                status=status.value,
                admin_id=admin.uid,
            )
            return await self.get_issue(issue_id)

    async def delete_issue(self, issue_id: IssueId, user: Optional[AppUser]) -> None:
        """Delete an issue (admins only).

        Raises:
            AuthenticationRequiredError: If nobody is signed in
            NotAuthorizedError: If the user is not an admin
            NotFoundError: If the issue does not exist
        """
        admin = self._require_admin(user, "delete issue")
        with logfire.span("issue_service.delete_issue", issue_id=issue_id):
            if not await self.issue_repository.delete(issue_id):
                raise NotFoundError("Issue", issue_id)
            logfire.info("Issue deleted", issue_id=issue_id, admin_id=admin.uid)

    async def add_comment(
        self, issue_id: IssueId, content: str, user: Optional[AppUser]
    ) -> Comment:
        """Append a comment to an issue.

        The author's role is snapshotted onto the comment.

        Raises:
            AuthenticationRequiredError: If nobody is signed in
            ValidationError: If the content is blank
            NotFoundError: If the issue does not exist
        """
        if user is None:
            raise AuthenticationRequiredError("comment on an issue")
        if not content.strip():
            raise ValidationError("Comment cannot be empty")

        with logfire.span("issue_service.add_comment", issue_id=issue_id):
            comment = Comment(
                id=CommentId(str(uuid4())),
                content=content.strip(),
                author=user.name or ANONYMOUS_AUTHOR,
                author_id=user.uid,
                author_photo_url=user.photo_url,
                author_role=user.role,
            )
            if not await self.issue_repository.append_comment(issue_id, comment):
                raise NotFoundError("Issue", issue_id)
            logfire.info(
                "Comment added", issue_id=issue_id, comment_id=comment.id, author_id=user.uid
            )
            return comment

    async def delete_comment(
        self, issue_id: IssueId, comment_id: CommentId, user: Optional[AppUser]
    ) -> bool:
        """Remove a comment by ID (admins only).

        Returns:
            True if the comment was removed, False if it did not exist

        Raises:
            AuthenticationRequiredError: If nobody is signed in
            NotAuthorizedError: If the user is not an admin
            NotFoundError: If the issue does not exist
        """
        self._require_admin(user, "delete comment")
        with logfire.span(
            "issue_service.delete_comment", issue_id=issue_id, comment_id=comment_id
        ):
            await self.get_issue(issue_id)
            removed = await self.issue_repository.remove_comment(issue_id, comment_id)
            if not removed:
                logfire.warn(
                    "Comment to delete not found",
                    issue_id=issue_id,
                    comment_id=comment_id,
                )
            return removed
