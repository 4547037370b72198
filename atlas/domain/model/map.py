"""Map render primitives.

The clusterer turns the visible issue set into markers; clicks on markers
turn into camera moves.
"""

from typing import Literal, Union

from pydantic import Field

from atlas.domain.model.common import DomainModel
from atlas.domain.model.issue import Issue
from atlas.domain.value import GeoPoint


class ClusterMarker(DomainModel):
    """Several nearby issues merged into one marker."""

    kind: Literal["cluster"] = "cluster"
    cluster_id: int
    point: GeoPoint  # Weighted centroid of the contained points
    point_count: int = Field(ge=2)


class IssueMarker(DomainModel):
    """A single issue rendered on its own."""

    kind: Literal["issue"] = "issue"
    point: GeoPoint
    issue: Issue


Marker = Union[ClusterMarker, IssueMarker]


class CameraMove(DomainModel):
    """Requested viewport transition."""

    center: GeoPoint
    zoom: float
    duration_ms: int


class LocationPick(DomainModel):
    """A point picked on the map for a new report, with its resolved address."""

    point: GeoPoint
    address: str
    camera: CameraMove
