"""Session restoration and sign-in."""

from typing import Optional

import logfire
from pydantic import BaseModel

from atlas.adapter.error import AuthenticationError, SignInCancelledError
from atlas.domain.model import AppUser
from atlas.domain.repository import KeyValueStore
from atlas.domain.service import IdentityProvider, UserService
from atlas.domain.value import AuthIdentity, UserId

from .notification import Notifier
from .session_store import SessionStore

TUTORIAL_FLAG_PREFIX = "tutorialCompleted"


def tutorial_key(user_id: str) -> str:
    """Storage key of a user's tutorial flag."""
    return f"{TUTORIAL_FLAG_PREFIX}_{user_id}"


class SessionState(BaseModel):
    """Result of restoring a session."""

    user: Optional[AppUser] = None
    is_admin: bool = False
    show_tutorial: bool = False


class SessionService:
    """Turns provider identities into application sessions."""

    def __init__(
        self,
        identity_provider: IdentityProvider,
        user_service: UserService,
        key_value_store: KeyValueStore,
        session_store: SessionStore,
        notifier: Notifier,
    ) -> None:
        """Initialize session service.

        Args:
            identity_provider: Verifies provider tokens
            user_service: User domain service
            key_value_store: Holds tutorial flags
            session_store: Session to populate
            notifier: Channel for user-facing errors
        """
        self.identity_provider = identity_provider
        self.user_service = user_service
        self.key_value_store = key_value_store
        self.session_store = session_store
        self.notifier = notifier

    async def restore(self, identity: Optional[AuthIdentity]) -> SessionState:
        """Restore the session for an identity (None means signed out).

        The user profile is created on first restoration. The tutorial is
        offered on a first-ever sign-in unless it was already completed.
        """
        if identity is None:
            self.session_store.clear()
            return SessionState()

        with logfire.span("session_service.restore", user_id=identity.uid):
            user = await self.user_service.get_or_create(identity)
            self.session_store.set_user(user)

            show_tutorial = False
            if identity.is_first_sign_in:
                completed = await self.key_value_store.get(tutorial_key(user.uid))
                show_tutorial = completed != "true"

            return SessionState(
                user=user, is_admin=user.is_admin, show_tutorial=show_tutorial
            )

    async def complete_tutorial(self, user_id: UserId) -> None:
        """Remember that the user has seen the tutorial."""
        await self.key_value_store.set(tutorial_key(user_id), "true")
        logfire.info("Tutorial completed", user_id=user_id)

    async def authenticate(self, token: Optional[str]) -> Optional[AuthIdentity]:
        """Verify a provider token; a missing token means signed out.

        Raises:
            AuthenticationError: If the token is invalid
        """
        if not token:
            return None
        return await self.identity_provider.verify(token)

    async def sign_in(self, token: str) -> Optional[SessionState]:
        """Sign in with a provider token.

        Returns:
            The restored session, or None if the user cancelled

        Raises:
            AuthenticationError: If the provider rejected the sign-in
        """
        try:
            identity = await self.identity_provider.verify(token)
        except SignInCancelledError:
            logfire.info("Sign-in cancelled by user")
            return None
        except AuthenticationError as e:
            logfire.error("Sign-in failed", code=e.code, error=e.description)
            await self.notifier.error("Falha no Login", e.description)
            raise
        return await self.restore(identity)

    def sign_out(self) -> None:
        """Clear the local session."""
        self.session_store.clear()
