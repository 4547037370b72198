"""Application user aggregate root."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from atlas.domain.model.common import DomainModel
from atlas.domain.value import UserId, UserRole


class AppUser(DomainModel):
    """Application user profile.

    Exactly one profile exists per authenticated identity. It is created
    lazily the first time a session is restored and never deleted.
    """

    uid: UserId
    email: Optional[str] = None
    name: str
    photo_url: Optional[str] = None
    role: UserRole = UserRole.USER
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    issues_reported: int = Field(default=0, ge=0)

    @property
    def is_admin(self) -> bool:
        """Whether the user can triage issues."""
        return self.role == UserRole.ADMIN
