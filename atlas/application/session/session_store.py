"""Observable holder of the signed-in user."""

from collections.abc import Callable
from typing import List, Optional

from atlas.domain.model import AppUser

SessionListener = Callable[[Optional[AppUser]], None]


class SessionStore:
    """Current user and admin flag for one client session.

    Listeners are called synchronously with the new user on every change.
    """

    def __init__(self, user: Optional[AppUser] = None) -> None:
        self._user = user
        self._listeners: List[SessionListener] = []

    @property
    def user(self) -> Optional[AppUser]:
        return self._user

    @property
    def is_admin(self) -> bool:
        return self._user is not None and self._user.is_admin

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def set_user(self, user: Optional[AppUser]) -> None:
        """Replace the current user and notify listeners."""
        self._user = user
        for listener in list(self._listeners):
            listener(user)

    def clear(self) -> None:
        """Sign out locally."""
        self.set_user(None)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener.

        Returns:
            Function that removes the listener (safe to call twice)
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
