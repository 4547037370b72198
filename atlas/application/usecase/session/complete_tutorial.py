"""Complete tutorial use case."""

from pydantic import BaseModel

from atlas.application.session import SessionService
from atlas.domain.value import UserId


class CompleteTutorialRequest(BaseModel):
    """Complete tutorial request."""

    user_id: str  # User ID from authenticated user


class CompleteTutorialResponse(BaseModel):
    """Complete tutorial response."""

    tutorial_completed: bool


class CompleteTutorialUseCase:
    """Use case for dismissing the first-login tutorial."""

    def __init__(self, session_service: SessionService) -> None:
        """Initialize complete tutorial use case.

        Args:
            session_service: Session service
        """
        self.session_service = session_service

    async def execute(self, request: CompleteTutorialRequest) -> CompleteTutorialResponse:
        """Persist the tutorial flag for the user."""
        await self.session_service.complete_tutorial(UserId(request.user_id))
        return CompleteTutorialResponse(tutorial_completed=True)
