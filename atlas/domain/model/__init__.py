"""Domain model entities for Atlas Cívico."""

from atlas.domain.model.comment import Comment
from atlas.domain.model.issue import Issue
from atlas.domain.model.map import (
    CameraMove,
    ClusterMarker,
    IssueMarker,
    LocationPick,
    Marker,
)
from atlas.domain.model.user import AppUser

__all__ = [
    "AppUser",
    "CameraMove",
    "ClusterMarker",
    "Comment",
    "Issue",
    "IssueMarker",
    "LocationPick",
    "Marker",
]
