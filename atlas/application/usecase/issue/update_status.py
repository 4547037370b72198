"""Update issue status use case."""

from pydantic import BaseModel

from atlas.domain.model import Issue
from atlas.domain.service import IssueService, UserService
from atlas.domain.value import IssueId, IssueStatus, UserId


class UpdateIssueStatusRequest(BaseModel):
    """Update issue status request."""

    issue_id: str
    status: IssueStatus
    user_id: str  # User ID from authenticated user


class UpdateIssueStatusUseCase:
    """Use case for triaging an issue (admins only)."""

    def __init__(self, issue_service: IssueService, user_service: UserService) -> None:
        """Initialize update issue status use case.

        Args:
            issue_service: Issue domain service
            user_service: User domain service
        """
        self.issue_service = issue_service
        self.user_service = user_service

    async def execute(self, request: UpdateIssueStatusRequest) -> Issue:
        """Change the status.

        Raises:
            NotAuthorizedError: If the user is not an admin
            NotFoundError: If the user or issue does not exist
        """
        user = await self.user_service.get_by_id(UserId(request.user_id))
        return await self.issue_service.update_status(
            IssueId(request.issue_id), request.status, user
        )
