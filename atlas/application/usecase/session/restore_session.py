"""Restore session use case."""

from typing import Optional

from pydantic import BaseModel

from atlas.application.session import SessionService, SessionState


class RestoreSessionRequest(BaseModel):
    """Restore session request."""

    token: str  # Provider identity token


class RestoreSessionUseCase:
    """Use case for signing in with a provider token."""

    def __init__(self, session_service: SessionService) -> None:
        """Initialize restore session use case.

        Args:
            session_service: Session service
        """
        self.session_service = session_service

    async def execute(self, request: RestoreSessionRequest) -> Optional[SessionState]:
        """Verify the token and restore the session.

        Returns:
            Session state, or None if the sign-in was cancelled

        Raises:
            AuthenticationError: If the provider rejected the token
        """
        return await self.session_service.sign_in(request.token)
