"""Get issue use case."""

from atlas.domain.model import Issue
from atlas.domain.service import IssueService
from atlas.domain.value import IssueId


class GetIssueUseCase:
    """Use case for fetching one issue."""

    def __init__(self, issue_service: IssueService) -> None:
        """Initialize get issue use case.

        Args:
            issue_service: Issue domain service
        """
        self.issue_service = issue_service

    async def execute(self, issue_id: str) -> Issue:
        """Fetch an issue.

        Raises:
            NotFoundError: If the issue does not exist
        """
        return await self.issue_service.get_issue(IssueId(issue_id))
