"""Application layer DI providers."""

from dishka import Scope, provide

from atlas.application.feed import IssueFeed
from atlas.application.session import (
    LoggingNotifier,
    Notifier,
    SessionService,
    SessionStore,
)
from atlas.application.usecase.comment import AddCommentUseCase, DeleteCommentUseCase
from atlas.application.usecase.geocode import ReverseGeocodeUseCase, SearchPlacesUseCase
from atlas.application.usecase.issue import (
    DeleteIssueUseCase,
    GetIssueUseCase,
    ListIssuesUseCase,
    ReportIssueUseCase,
    UpdateIssueStatusUseCase,
)
from atlas.application.usecase.map import GetMarkersUseCase
from atlas.application.usecase.session import (
    CompleteTutorialUseCase,
    GetCurrentUserUseCase,
    RestoreSessionUseCase,
)
from atlas.application.usecase.upvote import (
    GetUpvotedIssuesUseCase,
    UpvoteIssueUseCase,
)
from atlas.config import AuthSettings, FeedSettings, MapSettings
from atlas.domain.repository import IssueChangeStream, KeyValueStore, UnitOfWork
from atlas.domain.service import (
    GeocodingService,
    IdentityProvider,
    IssueService,
    UserService,
)
from atlas.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Live feed (one poller shared by every connected map)
    @provide(scope=Scope.APP)
    def get_issue_feed(
        self, change_stream: IssueChangeStream, feed_settings: FeedSettings
    ) -> IssueFeed:
        """Provide the live issue feed."""
        return IssueFeed(change_stream=change_stream, settings=feed_settings)

    # Session
    @provide(scope=Scope.REQUEST)
    def get_session_store(self) -> SessionStore:
        """Provide an empty per-request session."""
        return SessionStore()

    @provide(scope=Scope.REQUEST)
    def get_notifier(self) -> Notifier:
        """Provide the notifier for request-scoped services.

        REST callers receive errors as HTTP responses, so notifications
        are only logged.
        """
        return LoggingNotifier()

    @provide(scope=Scope.REQUEST)
    def get_session_service(
        self,
        identity_provider: IdentityProvider,
        user_service: UserService,
        key_value_store: KeyValueStore,
        session_store: SessionStore,
        notifier: Notifier,
    ) -> SessionService:
        """Provide session service."""
        return SessionService(
            identity_provider=identity_provider,
            user_service=user_service,
            key_value_store=key_value_store,
            session_store=session_store,
            notifier=notifier,
        )

    # Session use cases
    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self, session_service: SessionService
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(session_service=session_service)

    @provide(scope=Scope.REQUEST)
    def get_restore_session_use_case(
        self, session_service: SessionService
    ) -> RestoreSessionUseCase:
        """Provide restore session use case."""
        return RestoreSessionUseCase(session_service=session_service)

    @provide(scope=Scope.REQUEST)
    def get_complete_tutorial_use_case(
        self, session_service: SessionService
    ) -> CompleteTutorialUseCase:
        """Provide complete tutorial use case."""
        return CompleteTutorialUseCase(session_service=session_service)

    # Issue use cases
    @provide(scope=Scope.REQUEST)
    def get_report_issue_use_case(
        self, issue_service: IssueService, user_service: UserService
    ) -> ReportIssueUseCase:
        """Provide report issue use case."""
        return ReportIssueUseCase(issue_service=issue_service, user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_get_issue_use_case(self, issue_service: IssueService) -> GetIssueUseCase:
        """Provide get issue use case."""
        return GetIssueUseCase(issue_service=issue_service)

    @provide(scope=Scope.REQUEST)
    def get_list_issues_use_case(self, issue_service: IssueService) -> ListIssuesUseCase:
        """Provide list issues use case."""
        return ListIssuesUseCase(issue_service=issue_service)

    @provide(scope=Scope.REQUEST)
    def get_update_status_use_case(
        self, issue_service: IssueService, user_service: UserService
    ) -> UpdateIssueStatusUseCase:
        """Provide update issue status use case."""
        return UpdateIssueStatusUseCase(
            issue_service=issue_service, user_service=user_service
        )

    @provide(scope=Scope.REQUEST)
    def get_delete_issue_use_case(
        self, issue_service: IssueService, user_service: UserService
    ) -> DeleteIssueUseCase:
        """Provide delete issue use case."""
        return DeleteIssueUseCase(issue_service=issue_service, user_service=user_service)

    # Comment use cases
    @provide(scope=Scope.REQUEST)
    def get_add_comment_use_case(
        self, issue_service: IssueService, user_service: UserService
    ) -> AddCommentUseCase:
        """Provide add comment use case."""
        return AddCommentUseCase(issue_service=issue_service, user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_comment_use_case(
        self, issue_service: IssueService, user_service: UserService
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(
            issue_service=issue_service, user_service=user_service
        )

    # Upvote use cases
    @provide(scope=Scope.REQUEST)
    def get_upvote_issue_use_case(
        self,
        issue_service: IssueService,
        user_service: UserService,
        key_value_store: KeyValueStore,
        unit_of_work: UnitOfWork,
        auth_settings: AuthSettings,
    ) -> UpvoteIssueUseCase:
        """Provide upvote issue use case."""
        return UpvoteIssueUseCase(
            issue_service=issue_service,
            user_service=user_service,
            key_value_store=key_value_store,
            unit_of_work=unit_of_work,
            auth_settings=auth_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_upvoted_issues_use_case(
        self, key_value_store: KeyValueStore
    ) -> GetUpvotedIssuesUseCase:
        """Provide get upvoted issues use case."""
        return GetUpvotedIssuesUseCase(key_value_store=key_value_store)

    # Map use cases
    @provide(scope=Scope.REQUEST)
    def get_markers_use_case(
        self, issue_service: IssueService, map_settings: MapSettings
    ) -> GetMarkersUseCase:
        """Provide get markers use case."""
        return GetMarkersUseCase(issue_service=issue_service, map_settings=map_settings)

    # Geocoding use cases
    @provide(scope=Scope.REQUEST)
    def get_reverse_geocode_use_case(
        self, geocoding_service: GeocodingService, map_settings: MapSettings
    ) -> ReverseGeocodeUseCase:
        """Provide reverse geocode use case."""
        return ReverseGeocodeUseCase(
            geocoding_service=geocoding_service, map_settings=map_settings
        )

    @provide(scope=Scope.REQUEST)
    def get_search_places_use_case(
        self, geocoding_service: GeocodingService
    ) -> SearchPlacesUseCase:
        """Provide search places use case."""
        return SearchPlacesUseCase(geocoding_service=geocoding_service)
