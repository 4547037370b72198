"""Delete issue use case."""

from pydantic import BaseModel

from atlas.domain.service import IssueService, UserService
from atlas.domain.value import IssueId, UserId


class DeleteIssueRequest(BaseModel):
    """Delete issue request."""

    issue_id: str
    user_id: str  # User ID from authenticated user


class DeleteIssueResponse(BaseModel):
    """Delete issue response."""

    success: bool
    message: str


class DeleteIssueUseCase:
    """Use case for deleting an issue (admins only)."""

    def __init__(self, issue_service: IssueService, user_service: UserService) -> None:
        """Initialize delete issue use case.

        Args:
            issue_service: Issue domain service
            user_service: User domain service
        """
        self.issue_service = issue_service
        self.user_service = user_service

    async def execute(self, request: DeleteIssueRequest) -> DeleteIssueResponse:
        """Delete the issue.

        Raises:
            NotAuthorizedError: If the user is not an admin
            NotFoundError: If the user or issue does not exist
        """
        user = await self.user_service.get_by_id(UserId(request.user_id))
        await self.issue_service.delete_issue(IssueId(request.issue_id), user)
        return DeleteIssueResponse(success=True, message="Issue deleted")
