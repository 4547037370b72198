"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from atlas.domain.model import AppUser
from atlas.domain.value import UserId


class UserRepository(ABC):
    """Repository for AppUser profiles.

    Defines the contract for user persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[AppUser]:
        """Find a user profile by ID.

        Args:
            user_id: The user's unique identifier (from the auth provider)

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, user: AppUser) -> AppUser:
        """Create or overwrite a user profile.

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass

    @abstractmethod
    async def increment_issues_reported(self, user_id: UserId) -> None:
        """Atomically increment the user's reported-issue counter.

        Args:
            user_id: The user's ID
        """
        pass
