"""Map marker use cases."""

from typing import Optional

import logfire
from pydantic import BaseModel

from atlas.config import MapSettings
from atlas.domain.model import CameraMove, Marker
from atlas.domain.service import IssueService, SpatialClusterer
from atlas.domain.value import BoundingBox, GeoPoint


class GetMarkersRequest(BaseModel):
    """Get markers request."""

    bounds: BoundingBox
    zoom: float
    categories: list[str] = []  # Empty means every category


class GetMarkersResponse(BaseModel):
    """Markers for a viewport."""

    zoom: float
    markers: list[Marker]


class ExpandClusterRequest(BaseModel):
    """Expand cluster request.

    Cluster ids are only meaningful for the category selection they were
    computed under, so the same selection must be sent back.
    """

    cluster_id: int
    categories: list[str] = []
    latitude: Optional[float] = None  # Marker position, looked up if omitted
    longitude: Optional[float] = None


class GetMarkersUseCase:
    """Use case for clustering issues for a viewport."""

    def __init__(self, issue_service: IssueService, map_settings: MapSettings) -> None:
        """Initialize get markers use case.

        Args:
            issue_service: Issue domain service
            map_settings: Clustering parameters
        """
        self.issue_service = issue_service
        self.map_settings = map_settings

    async def _clusterer(self, categories: list[str]) -> SpatialClusterer:
        issues = await self.issue_service.list_issues(categories)
        clusterer = SpatialClusterer.from_settings(self.map_settings)
        clusterer.load(issues)
        return clusterer

    async def execute(self, request: GetMarkersRequest) -> GetMarkersResponse:
        """Cluster the visible issues."""
        with logfire.span("get_markers.execute", zoom=request.zoom):
            clusterer = await self._clusterer(request.categories)
            markers = clusterer.get_clusters(request.bounds, request.zoom)
            return GetMarkersResponse(zoom=request.zoom, markers=markers)

    async def expand(self, request: ExpandClusterRequest) -> CameraMove:
        """Camera move for a cluster click.

        Raises:
            NotFoundError: If the cluster does not exist
        """
        clusterer = await self._clusterer(request.categories)
        center = None
        if request.latitude is not None and request.longitude is not None:
            center = GeoPoint(latitude=request.latitude, longitude=request.longitude)
        return clusterer.expand_cluster(request.cluster_id, center)
