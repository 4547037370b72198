"""Domain value objects for Atlas Cívico."""

from atlas.domain.value.identifiers import CommentId, IssueId, UserId
from atlas.domain.value.types import (
    ANONYMOUS_AUTHOR,
    DEFAULT_USER_NAME,
    DEFAULT_CATEGORIES,
    DEFAULT_CATEGORY,
    AuthIdentity,
    BoundingBox,
    GeocodeResult,
    GeoPoint,
    IssueStatus,
    UserRole,
)

__all__ = [
    # Identifiers
    "IssueId",
    "CommentId",
    "UserId",
    # Types
    "ANONYMOUS_AUTHOR",
    "DEFAULT_USER_NAME",
    "AuthIdentity",
    "BoundingBox",
    "DEFAULT_CATEGORIES",
    "DEFAULT_CATEGORY",
    "GeocodeResult",
    "GeoPoint",
    "IssueStatus",
    "UserRole",
]
