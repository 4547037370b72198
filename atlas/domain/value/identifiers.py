"""Strongly typed identifiers for Atlas Cívico domain entities.

Identifiers are opaque strings: issue ids are assigned by the store,
comment ids are generated when the comment is created and user ids come
from the authentication provider.
"""

from typing import NewType

IssueId = NewType("IssueId", str)
CommentId = NewType("CommentId", str)
UserId = NewType("UserId", str)
