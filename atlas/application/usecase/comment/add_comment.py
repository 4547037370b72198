"""Add comment use case."""

from pydantic import BaseModel

from atlas.domain.model import Comment
from atlas.domain.service import IssueService, UserService
from atlas.domain.value import IssueId, UserId


class AddCommentRequest(BaseModel):
    """Add comment request."""

    issue_id: str
    content: str
    author_id: str  # User ID from authenticated user


class AddCommentUseCase:
    """Use case for commenting on an issue."""

    def __init__(self, issue_service: IssueService, user_service: UserService) -> None:
        """Initialize add comment use case.

        Args:
            issue_service: Issue domain service
            user_service: User domain service
        """
        self.issue_service = issue_service
        self.user_service = user_service

    async def execute(self, request: AddCommentRequest) -> Comment:
        """Append the comment.

        Raises:
            ValidationError: If the content is blank
            NotFoundError: If the author or issue does not exist
        """
        author = await self.user_service.get_by_id(UserId(request.author_id))
        return await self.issue_service.add_comment(
            IssueId(request.issue_id), request.content, author
        )
