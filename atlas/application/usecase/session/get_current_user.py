"""Get current user use case."""

from typing import Optional

from atlas.application.session import SessionService
from atlas.domain.model import AppUser


class GetCurrentUserUseCase:
    """Use case for resolving the user behind a bearer token.

    The profile is created on first use, exactly as a session restore
    would.
    """

    def __init__(self, session_service: SessionService) -> None:
        """Initialize get current user use case.

        Args:
            session_service: Session service
        """
        self.session_service = session_service

    async def execute(self, token: Optional[str]) -> Optional[AppUser]:
        """Resolve the signed-in user.

        Args:
            token: Provider token, or None when signed out

        Returns:
            The user, or None without a token

        Raises:
            AuthenticationError: If the token is invalid
        """
        identity = await self.session_service.authenticate(token)
        state = await self.session_service.restore(identity)
        return state.user
