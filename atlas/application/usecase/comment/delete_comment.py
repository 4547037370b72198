"""Delete comment use case."""

from pydantic import BaseModel

from atlas.domain.service import IssueService, UserService
from atlas.domain.value import CommentId, IssueId, UserId


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    issue_id: str
    comment_id: str
    user_id: str  # User ID from authenticated user


class DeleteCommentResponse(BaseModel):
    """Delete comment response."""

    success: bool
    message: str


class DeleteCommentUseCase:
    """Use case for removing a comment (admins only)."""

    def __init__(self, issue_service: IssueService, user_service: UserService) -> None:
        """Initialize delete comment use case.

        Args:
            issue_service: Issue domain service
            user_service: User domain service
        """
        self.issue_service = issue_service
        self.user_service = user_service

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Remove the comment; an unknown comment is not an error.

        Raises:
            NotAuthorizedError: If the user is not an admin
            NotFoundError: If the user or issue does not exist
        """
        user = await self.user_service.get_by_id(UserId(request.user_id))
        removed = await self.issue_service.delete_comment(
            IssueId(request.issue_id), CommentId(request.comment_id), user
        )
        if removed:
            return DeleteCommentResponse(success=True, message="Comment deleted")
        return DeleteCommentResponse(success=False, message="No comment found to delete")
