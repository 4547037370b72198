"""List issues use case."""

from pydantic import BaseModel

from atlas.domain.model import Issue
from atlas.domain.service import IssueService, distinct_categories


class ListIssuesRequest(BaseModel):
    """List issues request."""

    categories: list[str] = []  # Empty means every category


class ListIssuesResponse(BaseModel):
    """List issues response."""

    issues: list[Issue]
    total: int


class CategoriesResponse(BaseModel):
    """Distinct categories in order of first appearance."""

    categories: list[str]


class ListIssuesUseCase:
    """Use case for listing issues, newest first."""

    def __init__(self, issue_service: IssueService) -> None:
        """Initialize list issues use case.

        Args:
            issue_service: Issue domain service
        """
        self.issue_service = issue_service

    async def execute(self, request: ListIssuesRequest) -> ListIssuesResponse:
        """List issues matching the category filter."""
        issues = await self.issue_service.list_issues(request.categories)
        return ListIssuesResponse(issues=issues, total=len(issues))

    async def categories(self) -> CategoriesResponse:
        """Categories present in the current issue set."""
        issues = await self.issue_service.list_issues()
        return CategoriesResponse(categories=distinct_categories(issues))
