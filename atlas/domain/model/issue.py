"""Issue aggregate root.

An issue is a reported civic problem (broken lighting, waste, potholes...)
pinned to a location on the map.
"""

from datetime import datetime, timezone

from pydantic import Field

from atlas.domain.model.comment import Comment
from atlas.domain.model.common import DomainModel
from atlas.domain.value import DEFAULT_CATEGORY, GeoPoint, IssueId, IssueStatus, UserId


class Issue(DomainModel):
    """Issue aggregate root.

    Business rules:
    - ``upvotes`` is never negative and only grows (no downvote path)
    - ``comments`` are ordered newest first
    """

    id: IssueId
    title: str
    description: str
    category: str = DEFAULT_CATEGORY
    status: IssueStatus = IssueStatus.RECEIVED
    location: GeoPoint
    address: str = ""
    image_url: str | None = None
    reported_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    reporter: str = ""
    reporter_id: UserId | None = None
    upvotes: int = Field(default=0, ge=0)
    comments: tuple[Comment, ...] = ()
