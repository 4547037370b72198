"""User routes."""

from typing import Optional

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends

from atlas.application.usecase.session import GetCurrentUserUseCase
from atlas.application.usecase.upvote import (
    GetUpvotedIssuesUseCase,
    UpvotedIssuesResponse,
)
from atlas.interface.api.security import bearer_token, require_user

router = APIRouter(prefix="/users", tags=["users"], route_class=DishkaRoute)


@router.get("/me/upvotes", response_model=UpvotedIssuesResponse)
async def get_my_upvotes(
    get_upvoted_issues_use_case: FromDishka[GetUpvotedIssuesUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    token: Optional[str] = Depends(bearer_token),
) -> UpvotedIssuesResponse:
    """Issues the signed-in user has already upvoted."""
    user = await require_user(get_current_user_use_case, token, "view your upvotes")
    return await get_upvoted_issues_use_case.execute(user.uid)
