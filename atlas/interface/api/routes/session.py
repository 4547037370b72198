"""Session routes."""

from typing import Optional

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
import logfire

from atlas.adapter.error import AuthenticationError
from atlas.application.usecase.session import (
    CompleteTutorialRequest,
    CompleteTutorialResponse,
    CompleteTutorialUseCase,
    GetCurrentUserUseCase,
    RestoreSessionRequest,
    RestoreSessionUseCase,
)
from atlas.domain.model import AppUser
from atlas.interface.api.security import bearer_token, require_user

router = APIRouter(prefix="/session", tags=["session"], route_class=DishkaRoute)


class SignInAPIRequest(BaseModel):
    """API request for signing in with a provider token."""

    token: str


class SessionResponse(BaseModel):
    """Restored session.

    ``cancelled`` is set when the user abandoned the provider sign-in; no
    session is created in that case.
    """

    user: Optional[AppUser] = None
    is_admin: bool = False
    show_tutorial: bool = False
    cancelled: bool = False


@router.post("", response_model=SessionResponse)
async def sign_in(
    request: SignInAPIRequest,
    restore_session_use_case: FromDishka[RestoreSessionUseCase],
) -> SessionResponse:
    """Sign in with the identity token returned by the provider popup.

    Creates the user profile on first sign-in.

    Raises:
        HTTPException: 401 if the provider token is rejected
    """
    try:
        state = await restore_session_use_case.execute(
            RestoreSessionRequest(token=request.token)
        )
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=e.description
        )

    if state is None:
        return SessionResponse(cancelled=True)
    return SessionResponse(
        user=state.user, is_admin=state.is_admin, show_tutorial=state.show_tutorial
    )


@router.get("/me", response_model=AppUser)
async def get_me(
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    token: Optional[str] = Depends(bearer_token),
) -> AppUser:
    """Get the signed-in user's profile.

    Raises:
        HTTPException: 401 if not authenticated
    """
    return await require_user(get_current_user_use_case, token, "view your profile")


@router.post("/tutorial", response_model=CompleteTutorialResponse)
async def complete_tutorial(
    complete_tutorial_use_case: FromDishka[CompleteTutorialUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    token: Optional[str] = Depends(bearer_token),
) -> CompleteTutorialResponse:
    """Dismiss the first-login tutorial for good."""
    user = await require_user(get_current_user_use_case, token, "complete the tutorial")
    logfire.info("Completing tutorial", user_id=user.uid)
    return await complete_tutorial_use_case.execute(
        CompleteTutorialRequest(user_id=user.uid)
    )
