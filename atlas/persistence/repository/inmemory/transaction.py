"""In-memory unit of work for testing."""

from atlas.domain.error import PersistenceError
from atlas.domain.repository import UnitOfWork


class InMemoryUnitOfWork(UnitOfWork):
    """Counts commits; setting ``fail`` makes every commit raise.

    In-memory writes are visible immediately, so a failed commit here only
    exercises the caller's error path.
    """

    def __init__(self) -> None:
        self.commits = 0
        self.fail = False

    async def commit(self) -> None:
        if self.fail:
            raise PersistenceError("Commit failed: store unavailable")
        self.commits += 1
