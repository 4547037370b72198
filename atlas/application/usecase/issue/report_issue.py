"""Report issue use case."""

from typing import Optional

import logfire
from pydantic import BaseModel

from atlas.domain.model import Issue
from atlas.domain.service import IssueService, NewIssue, UserService
from atlas.domain.value import UserId


class ReportIssueRequest(BaseModel):
    """Report issue request."""

    title: str
    description: str
    category: Optional[str] = None
    latitude: float
    longitude: float
    address: str
    reporter_id: str  # User ID from authenticated user


class ReportIssueUseCase:
    """Use case for reporting a new issue."""

    def __init__(self, issue_service: IssueService, user_service: UserService) -> None:
        """Initialize report issue use case.

        Args:
            issue_service: Issue domain service
            user_service: User domain service
        """
        self.issue_service = issue_service
        self.user_service = user_service

    async def execute(self, request: ReportIssueRequest) -> Issue:
        """Execute report issue flow.

        Steps:
        1. Load the reporter profile
        2. Validate and store the issue (via IssueService)
        3. Bump the reporter's counter (via IssueService)

        Raises:
            NotFoundError: If the reporter has no profile
            ValidationError: If the report is incomplete
        """
        reporter = await self.user_service.get_by_id(UserId(request.reporter_id))
        with logfire.span("report_issue.execute", reporter_id=reporter.uid):
            new_issue = NewIssue(
                title=request.title,
                description=request.description,
                category=request.category,
                latitude=request.latitude,
                longitude=request.longitude,
                address=request.address,
            )
            return await self.issue_service.report_issue(new_issue, reporter)
