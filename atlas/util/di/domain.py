"""Domain layer DI providers."""

from dishka import Scope, provide

from atlas.config import GeocodingSettings, MapSettings
from atlas.domain.repository import IssueRepository, UserRepository
from atlas.domain.service import (
    GeocodingClient,
    GeocodingService,
    IssueService,
    UserService,
)
from atlas.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_user_service(self, user_repository: UserRepository) -> UserService:
        """Provide user domain service."""
        return UserService(user_repository=user_repository)

    @provide
    def get_issue_service(
        self, issue_repository: IssueRepository, user_service: UserService
    ) -> IssueService:
        """Provide issue domain service."""
        return IssueService(issue_repository=issue_repository, user_service=user_service)

    @provide
    def get_geocoding_service(
        self,
        geocoding_client: GeocodingClient,
        map_settings: MapSettings,
        geocoding_settings: GeocodingSettings,
    ) -> GeocodingService:
        """Provide geocoding domain service."""
        return GeocodingService(
            geocoding_client=geocoding_client,
            pick_min_zoom=map_settings.pick_min_zoom,
            move_duration_ms=map_settings.focus_move_duration_ms,
            search_limit=geocoding_settings.search_limit,
        )
