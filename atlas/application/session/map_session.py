"""Live map session for one connected viewer.

Wires the issue feed through the category filter and the clusterer to an
outbound event sink, and routes viewer commands (viewport changes, filter
toggles, upvotes, marker clicks) back in. Commands are handled one at a
time.
"""

from collections.abc import Awaitable, Callable
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

import logfire
from pydantic import BaseModel, Field, TypeAdapter

from atlas.config import MapSettings
from atlas.domain.error import AuthenticationRequiredError, NotFoundError
from atlas.domain.model import ClusterMarker, Issue
from atlas.domain.service import CategoryFilter, SpatialClusterer
from atlas.domain.value import BoundingBox, GeoPoint, IssueId

from ..feed import IssueFeed, Subscription
from .notification import CallbackNotifier, Notification
from .session_store import SessionStore
from .upvote import UpvoteOutcome, UpvoteReconciler

EventSink = Callable[[Dict[str, Any]], Awaitable[None]]


class ViewportCommand(BaseModel):
    type: Literal["viewport"]
    bounds: BoundingBox
    zoom: float


class ToggleCategoryCommand(BaseModel):
    type: Literal["toggle_category"]
    category: str


class UpvoteCommand(BaseModel):
    type: Literal["upvote"]
    issue_id: str


class ExpandClusterCommand(BaseModel):
    type: Literal["expand_cluster"]
    cluster_id: int


class SelectIssueCommand(BaseModel):
    type: Literal["select_issue"]
    issue_id: str


MapCommand = Annotated[
    Union[
        ViewportCommand,
        ToggleCategoryCommand,
        UpvoteCommand,
        ExpandClusterCommand,
        SelectIssueCommand,
    ],
    Field(discriminator="type"),
]

map_command_adapter = TypeAdapter(MapCommand)


class MapSession:
    """Per-viewer composition of feed, filter, clusterer and upvotes.

    Re-clusters only when the visible issue set, the bounds or the zoom
    changed. Outbound events are JSON-ready dicts with a ``type`` of
    ``issues``, ``markers``, ``camera``, ``notification``, ``redirect`` or
    ``upvotes``.
    """

    def __init__(
        self,
        feed: IssueFeed,
        session_store: SessionStore,
        reconciler_factory: Callable[[CallbackNotifier], UpvoteReconciler],
        send: EventSink,
        settings: MapSettings,
    ) -> None:
        """Initialize the session.

        Args:
            feed: Live issue feed
            session_store: Holds the viewer's user (may be signed out)
            reconciler_factory: Builds the upvote reconciler given the
                session's notifier
            send: Outbound event sink
            settings: Map defaults and clustering parameters
        """
        self.feed = feed
        self.session_store = session_store
        self.send = send
        self.notifier = CallbackNotifier(self._send_notification)
        self.reconciler = reconciler_factory(self.notifier)
        self.category_filter = CategoryFilter()
        self.clusterer = SpatialClusterer.from_settings(settings)

        self.issues: List[Issue] = []
        self.bounds = BoundingBox.world()
        self.zoom: float = settings.default_zoom

        self._visible: Optional[List[Issue]] = None
        self._rendered: Optional[tuple[BoundingBox, float]] = None
        # Cluster ids of the markers last sent, with their positions
        self._clusters: Dict[int, GeoPoint] = {}
        self._subscription: Optional[Subscription] = None
        self._closed = False

    async def _emit(self, event_type: str, **payload: Any) -> None:
        await self.send({"type": event_type, **payload})

    async def _send_notification(self, notification: Notification) -> None:
        await self._emit("notification", **notification.model_dump(mode="json"))

    async def start(self) -> None:
        """Send the viewer's upvote ledger and start the live feed."""
        await self._send_upvotes()
        self._subscription = self.feed.subscribe(self._on_issues, self._on_feed_error)

    async def close(self) -> None:
        """Stop the feed subscription (once)."""
        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            self._subscription.cancel()
        logfire.info("Map session closed")

    async def _on_issues(self, issues: List[Issue]) -> None:
        self.issues = issues
        categories = self.category_filter.update(issues)
        await self._emit(
            "issues",
            issues=[issue.model_dump(mode="json") for issue in issues],
            categories=categories,
            selected=sorted(self.category_filter.selected),
        )
        await self.render()

    async def _on_feed_error(self, error: BaseException) -> None:
        await self.notifier.error(
            "Erro ao carregar ocorrências",
            "A atualização ao vivo foi interrompida. Recarregue a página.",
        )

    async def render(self) -> bool:
        """Push markers if the visible set or viewport changed.

        Returns:
            Whether markers were sent
        """
        visible = self.category_filter.apply(self.issues)
        viewport = (self.bounds, self.zoom)
        if visible == self._visible and viewport == self._rendered:
            return False

        if visible != self._visible:
            self.clusterer.load(visible)
            self._visible = visible
        self._rendered = viewport

        markers = self.clusterer.get_clusters(self.bounds, self.zoom)
        self._clusters = {
            marker.cluster_id: marker.point
            for marker in markers
            if isinstance(marker, ClusterMarker)
        }
        await self._emit(
            "markers",
            zoom=self.zoom,
            markers=[marker.model_dump(mode="json") for marker in markers],
        )
        return True

    async def _send_upvotes(self) -> None:
        ledger = await self.reconciler.ledger()
        await self._emit(
            "upvotes", issue_ids=sorted(ledger.issue_ids) if ledger else []
        )

    def _find_issue(self, issue_id: str) -> Optional[Issue]:
        return next((issue for issue in self.issues if issue.id == issue_id), None)

    async def handle(self, message: Any) -> None:
        """Handle one inbound command.

        Raises:
            pydantic.ValidationError: If the message is not a known command
        """
        command = map_command_adapter.validate_python(message)
        with logfire.span("map_session.handle", command=command.type):
            if isinstance(command, ViewportCommand):
                self.bounds = command.bounds
                self.zoom = command.zoom
                await self.render()
            elif isinstance(command, ToggleCategoryCommand):
                self.category_filter.toggle(command.category)
                await self._emit(
                    "issues",
                    issues=[issue.model_dump(mode="json") for issue in self.issues],
                    categories=self.category_filter.categories,
                    selected=sorted(self.category_filter.selected),
                )
                await self.render()
            elif isinstance(command, UpvoteCommand):
                await self._upvote(command.issue_id)
            elif isinstance(command, ExpandClusterCommand):
                await self._expand(command.cluster_id)
            else:
                await self._select(command.issue_id)

    async def _upvote(self, issue_id: str) -> None:
        issue = self._find_issue(issue_id)
        if issue is None:
            await self.notifier.error("Ocorrência não encontrada")
            return
        try:
            outcome = await self.reconciler.upvote(IssueId(issue_id), issue.upvotes)
        except AuthenticationRequiredError as e:
            await self._emit("redirect", to=e.redirect_to)
            return
        if outcome == UpvoteOutcome.APPLIED:
            await self._send_upvotes()

    async def _expand(self, cluster_id: int) -> None:
        # Ids are only meaningful for the markers the viewer was last sent
        center = self._clusters.get(cluster_id)
        try:
            if center is None:
                raise NotFoundError("Cluster", str(cluster_id))
            camera = self.clusterer.expand_cluster(cluster_id, center)
        except NotFoundError:
            logfire.warn("Expand of a cluster not on screen", cluster_id=cluster_id)
            await self.notifier.info(
                "Agrupamento desatualizado",
                "O mapa foi atualizado. Toque no agrupamento novamente.",
            )
            return
        await self._emit("camera", **camera.model_dump(mode="json"))

    async def _select(self, issue_id: str) -> None:
        issue = self._find_issue(issue_id)
        if issue is None:
            await self.notifier.error("Ocorrência não encontrada")
            return
        camera = self.clusterer.focus_issue(issue, self.zoom)
        await self._emit("camera", issue_id=issue.id, **camera.model_dump(mode="json"))
