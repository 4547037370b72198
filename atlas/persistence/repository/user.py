"""PostgreSQL implementation of User repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from atlas.domain.model import AppUser
from atlas.domain.repository import UserRepository
from atlas.domain.value import UserId
from atlas.persistence.mappers import row_to_user, user_to_dict
from atlas.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[AppUser]:
        """Find a user by ID.

        Args:
            user_id: User ID to look up

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.uid == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def save(self, user: AppUser) -> AppUser:
        """Save a user (create or update).

        Args:
            user: User to save

        Returns:
            Saved user
        """
        # Check if user exists
        existing = await self.find_by_id(user.uid)

        user_dict = user_to_dict(user)

        if existing:
            # Update
            stmt = (
                users_table.update()
                .where(users_table.c.uid == user.uid)
                .values(**user_dict)
            )
            await self.session.execute(stmt)
        else:
            # Insert
            stmt = users_table.insert().values(**user_dict)
            await self.session.execute(stmt)

        await self.session.flush()
        return user

    async def increment_issues_reported(self, user_id: UserId) -> None:
        """Atomically increment the reported-issue counter.

        Args:
            user_id: User ID
        """
        stmt = (
            users_table.update()
            .where(users_table.c.uid == user_id)
            .values(issues_reported=users_table.c.issues_reported + 1)
        )
        await self.session.execute(stmt)
