"""Unit-of-work interface."""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """Commits the writes made so far in the current request.

    Request-scoped writes are normally committed when the request ends.
    Callers that must know the outcome before answering (the upvote ledger
    is only saved once the new count is durable) commit explicitly.
    """

    @abstractmethod
    async def commit(self) -> None:
        """Make pending writes durable.

        Raises:
            PersistenceError: If the store refused the commit; pending
                writes are discarded
        """
        pass
