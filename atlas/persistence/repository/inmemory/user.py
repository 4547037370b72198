"""In-memory user repository for testing."""

from typing import Optional

from atlas.domain.model import AppUser
from atlas.domain.repository import UserRepository
from atlas.domain.value import UserId


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self) -> None:
        self._users: dict[UserId, AppUser] = {}

    async def find_by_id(self, user_id: UserId) -> Optional[AppUser]:
        """Find a user by ID."""
        return self._users.get(user_id)

    async def save(self, user: AppUser) -> AppUser:
        """Save or update a user."""
        self._users[user.uid] = user
        return user

    async def increment_issues_reported(self, user_id: UserId) -> None:
        """Atomically increment the reported-issue counter."""
        user = self._users.get(user_id)
        if user:
            updated_user = user.model_copy(
                update={"issues_reported": user.issues_reported + 1}
            )
            self._users[user_id] = updated_user
