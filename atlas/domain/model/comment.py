"""Comment entity.

Comments are flat remarks attached to an issue. The author's role is a
snapshot taken when the comment is written.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from atlas.domain.model.common import DomainModel
from atlas.domain.value import CommentId, UserId, UserRole


class Comment(DomainModel):
    """Comment entity.

    Business rules:
    - ``author_role`` is captured at creation and never rewritten, even if
      the author is later promoted or demoted
    - Removal is keyed by ``id`` only
    """

    id: CommentId
    content: str
    author: str
    author_id: UserId
    author_photo_url: Optional[str] = None
    author_role: UserRole = UserRole.USER
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
