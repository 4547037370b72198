"""In-memory repository implementations for testing."""

from .issue import InMemoryIssueRepository
from .keyvalue import InMemoryKeyValueStore
from .transaction import InMemoryUnitOfWork
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryIssueRepository",
    "InMemoryKeyValueStore",
    "InMemoryUnitOfWork",
    "InMemoryUserRepository",
]
