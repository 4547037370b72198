"""Repository interfaces for Atlas Cívico domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from atlas.domain.repository.issue import (
    IssueChangeStream,
    IssueDocument,
    IssueRepository,
)
from atlas.domain.repository.storage import KeyValueStore
from atlas.domain.repository.transaction import UnitOfWork
from atlas.domain.repository.user import UserRepository

__all__ = [
    "IssueChangeStream",
    "IssueDocument",
    "IssueRepository",
    "KeyValueStore",
    "UnitOfWork",
    "UserRepository",
]
