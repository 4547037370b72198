"""PostgreSQL unit of work."""

import logfire
from sqlalchemy.ext.asyncio import AsyncSession

from atlas.domain.error import PersistenceError
from atlas.domain.repository import UnitOfWork


class SessionUnitOfWork(UnitOfWork):
    """Commits the request's SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def commit(self) -> None:
        """Commit now; on failure roll back so the session stays usable."""
        try:
            await self.session.commit()
        except Exception as e:
            logfire.warn("Commit failed, rolling back", error=str(e))
            await self.session.rollback()
            raise PersistenceError(f"Commit failed: {e}") from e
