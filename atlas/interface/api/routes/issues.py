"""Issue routes."""

from typing import Optional

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
import logfire

from atlas.application.usecase.comment import (
    AddCommentRequest,
    AddCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
)
from atlas.application.usecase.issue import (
    CategoriesResponse,
    DeleteIssueRequest,
    DeleteIssueResponse,
    DeleteIssueUseCase,
    GetIssueUseCase,
    ListIssuesRequest,
    ListIssuesResponse,
    ListIssuesUseCase,
    ReportIssueRequest,
    ReportIssueUseCase,
    UpdateIssueStatusRequest,
    UpdateIssueStatusUseCase,
)
from atlas.application.usecase.session import GetCurrentUserUseCase
from atlas.application.usecase.upvote import (
    UpvoteIssueRequest,
    UpvoteIssueResponse,
    UpvoteIssueUseCase,
)
from atlas.domain.error import DomainError
from atlas.domain.model import Comment, Issue
from atlas.domain.value import IssueStatus
from atlas.interface.api.security import bearer_token, optional_user, require_user
from atlas.interface.error import to_http_exception

router = APIRouter(prefix="/issues", tags=["issues"], route_class=DishkaRoute)


class ReportIssueAPIRequest(BaseModel):
    """API request for reporting an issue."""

    title: str = Field(max_length=200)
    description: str = Field(max_length=5000)
    category: Optional[str] = None
    latitude: float
    longitude: float
    address: str = Field(max_length=500)


class UpdateStatusAPIRequest(BaseModel):
    """API request for triaging an issue."""

    status: IssueStatus


class UpvoteAPIRequest(BaseModel):
    """API request for upvoting; the count is the one shown to the user."""

    current_upvotes: Optional[int] = Field(default=None, ge=0)


class AddCommentAPIRequest(BaseModel):
    """API request for commenting on an issue."""

    content: str = Field(max_length=2000)


@router.get("", response_model=ListIssuesResponse)
async def list_issues(
    list_issues_use_case: FromDishka[ListIssuesUseCase],
    category: list[str] = Query(default=[]),
) -> ListIssuesResponse:
    """List issues, newest first.

    Args:
        list_issues_use_case: List issues use case from DI
        category: Categories to keep (repeatable); none keeps everything

    Example:
        GET /issues?category=Iluminação%20pública
    """
    return await list_issues_use_case.execute(ListIssuesRequest(categories=category))


@router.get("/categories", response_model=CategoriesResponse)
async def list_categories(
    list_issues_use_case: FromDishka[ListIssuesUseCase],
) -> CategoriesResponse:
    """Distinct categories present in the current issue set."""
    return await list_issues_use_case.categories()


@router.get("/{issue_id}", response_model=Issue)
async def get_issue(
    issue_id: str,
    get_issue_use_case: FromDishka[GetIssueUseCase],
) -> Issue:
    """Get one issue with its comments.

    Raises:
        HTTPException: 404 if the issue does not exist
    """
    try:
        return await get_issue_use_case.execute(issue_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("", response_model=Issue, status_code=status.HTTP_201_CREATED)
async def report_issue(
    request: ReportIssueAPIRequest,
    report_issue_use_case: FromDishka[ReportIssueUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    token: Optional[str] = Depends(bearer_token),
) -> Issue:
    """Report a new issue.

    Requires authentication. The issue starts as Received with no upvotes
    and a placeholder picture.

    Raises:
        HTTPException: 401 if not authenticated, 400 if a field is invalid
    """
    user = await require_user(get_current_user_use_case, token, "report an issue")

    try:
        return await report_issue_use_case.execute(
            ReportIssueRequest(
                title=request.title,
                description=request.description,
                category=request.category,
                latitude=request.latitude,
                longitude=request.longitude,
                address=request.address,
                reporter_id=user.uid,
            )
        )
    except DomainError as e:
        logfire.warn("Issue report rejected", error=str(e), reporter_id=user.uid)
        raise to_http_exception(e)


@router.patch("/{issue_id}/status", response_model=Issue)
async def update_issue_status(
    issue_id: str,
    request: UpdateStatusAPIRequest,
    update_status_use_case: FromDishka[UpdateIssueStatusUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    token: Optional[str] = Depends(bearer_token),
) -> Issue:
    """Change an issue's status (admins only).

    Raises:
        HTTPException: 401, 403 or 404
    """
    user = await require_user(get_current_user_use_case, token, "update issue status")

    try:
        return await update_status_use_case.execute(
            UpdateIssueStatusRequest(
                issue_id=issue_id, status=request.status, user_id=user.uid
            )
        )
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{issue_id}", response_model=DeleteIssueResponse)
async def delete_issue(
    issue_id: str,
    delete_issue_use_case: FromDishka[DeleteIssueUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    token: Optional[str] = Depends(bearer_token),
) -> DeleteIssueResponse:
    """Delete an issue (admins only).

    Raises:
        HTTPException: 401, 403 or 404
    """
    user = await require_user(get_current_user_use_case, token, "delete an issue")

    try:
        return await delete_issue_use_case.execute(
            DeleteIssueRequest(issue_id=issue_id, user_id=user.uid)
        )
    except DomainError as e:
        raise to_http_exception(e)


@router.post("/{issue_id}/upvote", response_model=UpvoteIssueResponse)
async def upvote_issue(
    issue_id: str,
    upvote_issue_use_case: FromDishka[UpvoteIssueUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    request: Optional[UpvoteAPIRequest] = None,
    token: Optional[str] = Depends(bearer_token),
) -> UpvoteIssueResponse:
    """Support an issue with one upvote.

    Signed-out callers get a 401 whose detail names the login path to
    redirect to. A failed write is reported in ``notifications`` with
    outcome ``failed``; nothing is counted in that case.
    """
    user = await optional_user(get_current_user_use_case, token)

    try:
        return await upvote_issue_use_case.execute(
            UpvoteIssueRequest(
                issue_id=issue_id,
                user_id=user.uid if user else None,
                current_upvotes=request.current_upvotes if request else None,
            )
        )
    except DomainError as e:
        raise to_http_exception(e)


@router.post(
    "/{issue_id}/comments",
    response_model=Comment,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    issue_id: str,
    request: AddCommentAPIRequest,
    add_comment_use_case: FromDishka[AddCommentUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    token: Optional[str] = Depends(bearer_token),
) -> Comment:
    """Comment on an issue.

    Raises:
        HTTPException: 401 if not authenticated, 400 if blank, 404 if the
            issue does not exist
    """
    user = await require_user(get_current_user_use_case, token, "comment on an issue")

    try:
        return await add_comment_use_case.execute(
            AddCommentRequest(
                issue_id=issue_id, content=request.content, author_id=user.uid
            )
        )
    except DomainError as e:
        raise to_http_exception(e)


@router.delete(
    "/{issue_id}/comments/{comment_id}", response_model=DeleteCommentResponse
)
async def delete_comment(
    issue_id: str,
    comment_id: str,
    delete_comment_use_case: FromDishka[DeleteCommentUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    token: Optional[str] = Depends(bearer_token),
) -> DeleteCommentResponse:
    """Remove a comment (admins only).

    An unknown comment is reported with ``success: false``, not an error.
    """
    user = await require_user(get_current_user_use_case, token, "delete a comment")

    try:
        return await delete_comment_use_case.execute(
            DeleteCommentRequest(
                issue_id=issue_id, comment_id=comment_id, user_id=user.uid
            )
        )
    except DomainError as e:
        raise to_http_exception(e)
