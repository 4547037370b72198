"""User domain service."""

from datetime import datetime, timezone
from typing import Optional

import logfire

from atlas.domain.error import NotFoundError
from atlas.domain.model import AppUser
from atlas.domain.repository import UserRepository
from atlas.domain.value import DEFAULT_USER_NAME, AuthIdentity, UserId, UserRole

from .base import Service


def display_name_for(identity: AuthIdentity) -> str:
    """Profile name for a new user.

    Falls back from the provider display name to the email local part,
    then to a generic name.
    """
    if identity.display_name and identity.display_name.strip():
        return identity.display_name.strip()
    if identity.email and identity.email.split("@")[0].strip():
        return identity.email.split("@")[0].strip()
    return DEFAULT_USER_NAME


class UserService(Service):
    """Domain service for user operations."""

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    async def get_by_id(self, user_id: UserId) -> AppUser:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User entity

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=user_id):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=user_id)
                raise NotFoundError("User", user_id)
            return user

    async def find_by_id(self, user_id: UserId) -> Optional[AppUser]:
        """Get user by ID, or None if no profile exists yet."""
        return await self.user_repository.find_by_id(user_id)

    async def get_or_create(self, identity: AuthIdentity) -> AppUser:
        """Return the profile for an identity, creating it on first use.

        New profiles get the ``user`` role and a zero report counter.

        Args:
            identity: Signed-in identity

        Returns:
            Existing or newly created user
        """
        with logfire.span("user_service.get_or_create", user_id=identity.uid):
            user = await self.user_repository.find_by_id(UserId(identity.uid))
            if user:
                return user

            user = AppUser(
                uid=UserId(identity.uid),
                email=identity.email,
                name=display_name_for(identity),
                photo_url=identity.photo_url,
                role=UserRole.USER,
                created_at=datetime.now(timezone.utc),
                issues_reported=0,
            )
            saved = await self.user_repository.save(user)
            logfire.info("User profile created", user_id=saved.uid, name=saved.name)
            return saved

    async def increment_issues_reported(self, user_id: UserId) -> None:
        """Atomically increment the user's reported-issue counter.

        Args:
            user_id: User ID
        """
        with logfire.span("user_service.increment_issues_reported", user_id=user_id):
            await self.user_repository.increment_issues_reported(user_id)
