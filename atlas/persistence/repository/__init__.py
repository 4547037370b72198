"""PostgreSQL repository implementations."""

from atlas.persistence.repository.change_stream import PostgresIssueChangeStream
from atlas.persistence.repository.issue import PostgresIssueRepository
from atlas.persistence.repository.keyvalue import FileKeyValueStore
from atlas.persistence.repository.transaction import SessionUnitOfWork
from atlas.persistence.repository.user import PostgresUserRepository

__all__ = [
    "FileKeyValueStore",
    "PostgresIssueChangeStream",
    "PostgresIssueRepository",
    "PostgresUserRepository",
    "SessionUnitOfWork",
]
