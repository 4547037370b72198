"""Spatial clustering of issues for map rendering.

Hierarchical greedy clustering over static KD-tree indexes in spherical
mercator unit space. Each zoom level below ``max_zoom`` is built from the
level above it: points within ``radius`` pixels (at tile ``extent``) of an
unclustered point are merged into a weighted-centroid cluster. The level
at ``max_zoom`` holds the raw points, so any zoom at or beyond it shows
every issue on its own.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import logfire

from atlas.config import MapSettings
from atlas.domain.error import NotFoundError
from atlas.domain.model import CameraMove, ClusterMarker, Issue, IssueMarker, Marker
from atlas.domain.value import BoundingBox, GeoPoint

from .base import Service

# Cluster ids pack the origin index and zoom: (index << 5) + (zoom + 1) + n
_ZOOM_BITS = 5
_ZOOM_MASK = (1 << _ZOOM_BITS) - 1


def lng_x(lng: float) -> float:
    """Project longitude to mercator x in [0, 1]."""
    return lng / 360.0 + 0.5


def lat_y(lat: float) -> float:
    """Project latitude to mercator y in [0, 1] (clamped at the poles)."""
    sin = math.sin(lat * math.pi / 180.0)
    if sin >= 1.0:
        return 0.0
    if sin <= -1.0:
        return 1.0
    y = 0.5 - 0.25 * math.log((1 + sin) / (1 - sin)) / math.pi
    return min(max(y, 0.0), 1.0)


def x_lng(x: float) -> float:
    """Inverse of :func:`lng_x`."""
    return (x - 0.5) * 360.0


def y_lat(y: float) -> float:
    """Inverse of :func:`lat_y`."""
    y2 = (180.0 - y * 360.0) * math.pi / 180.0
    return 360.0 * math.atan(math.exp(y2)) / math.pi - 90.0


class KDIndex:
    """Static 2D KD-tree over points in unit space.

    Points are stored in a flat, implicitly balanced layout: the median of
    each segment splits it on alternating axes. Queries return the original
    point indexes.
    """

    def __init__(
        self, xs: Sequence[float], ys: Sequence[float], node_size: int = 64
    ) -> None:
        if len(xs) != len(ys):
            raise ValueError("Coordinate sequences must have equal length")
        self.node_size = node_size
        self.ids: List[int] = list(range(len(xs)))
        self.xs: List[float] = list(xs)
        self.ys: List[float] = list(ys)
        self._build(0, len(self.ids) - 1, 0)

    def __len__(self) -> int:
        return len(self.ids)

    def _build(self, left: int, right: int, axis: int) -> None:
        if right - left <= self.node_size:
            return
        coords = self.xs if axis == 0 else self.ys
        ordered = sorted(range(left, right + 1), key=lambda k: (coords[k], self.ids[k]))
        ids = [self.ids[k] for k in ordered]
        xs = [self.xs[k] for k in ordered]
        ys = [self.ys[k] for k in ordered]
        self.ids[left : right + 1] = ids
        self.xs[left : right + 1] = xs
        self.ys[left : right + 1] = ys

        middle = (left + right) >> 1
        self._build(left, middle - 1, 1 - axis)
        self._build(middle + 1, right, 1 - axis)

    def range(
        self, min_x: float, min_y: float, max_x: float, max_y: float
    ) -> List[int]:
        """Return indexes of points inside the axis-aligned box (inclusive)."""
        result: List[int] = []
        stack = [(0, len(self.ids) - 1, 0)]
        while stack:
            left, right, axis = stack.pop()

            if right - left <= self.node_size:
                for i in range(left, right + 1):
                    x, y = self.xs[i], self.ys[i]
                    if min_x <= x <= max_x and min_y <= y <= max_y:
                        result.append(self.ids[i])
                continue

            middle = (left + right) >> 1
            x, y = self.xs[middle], self.ys[middle]
            if min_x <= x <= max_x and min_y <= y <= max_y:
                result.append(self.ids[middle])

            lower, upper = (min_x, max_x) if axis == 0 else (min_y, max_y)
            split = x if axis == 0 else y
            if lower <= split:
                stack.append((left, middle - 1, 1 - axis))
            if upper >= split:
                stack.append((middle + 1, right, 1 - axis))
        return result

    def within(self, qx: float, qy: float, r: float) -> List[int]:
        """Return indexes of points within distance ``r`` of (qx, qy)."""
        result: List[int] = []
        r2 = r * r
        stack = [(0, len(self.ids) - 1, 0)]
        while stack:
            left, right, axis = stack.pop()

            if right - left <= self.node_size:
                for i in range(left, right + 1):
                    dx, dy = self.xs[i] - qx, self.ys[i] - qy
                    if dx * dx + dy * dy <= r2:
                        result.append(self.ids[i])
                continue

            middle = (left + right) >> 1
            x, y = self.xs[middle], self.ys[middle]
            dx, dy = x - qx, y - qy
            if dx * dx + dy * dy <= r2:
                result.append(self.ids[middle])

            center, split = (qx, x) if axis == 0 else (qy, y)
            if center - r <= split:
                stack.append((left, middle - 1, 1 - axis))
            if center + r >= split:
                stack.append((middle + 1, right, 1 - axis))
        return result


@dataclass
class _Node:
    """A point or cluster at one zoom level.

    ``ref`` is the issue index for raw points and the cluster id for
    clusters; ``zoom`` is the last zoom at which the node was visited.
    """

    x: float
    y: float
    zoom: float
    ref: int
    parent: int
    count: int

    @property
    def is_cluster(self) -> bool:
        return self.count > 1


class _Level:
    """Nodes of one zoom level and their spatial index."""

    def __init__(self, nodes: List[_Node], node_size: int) -> None:
        self.nodes = nodes
        self.index = KDIndex([n.x for n in nodes], [n.y for n in nodes], node_size)


class SpatialClusterer(Service):
    """Clusters issues into map markers per zoom level.

    ``load`` is the only expensive call and should run only when the
    visible point set changes; queries against a loaded index are cheap
    and deterministic.
    """

    def __init__(
        self,
        radius: int = 75,
        extent: int = 512,
        min_points: int = 2,
        min_zoom: int = 0,
        max_zoom: int = 20,
        node_size: int = 64,
        cluster_move_duration_ms: int = 800,
        focus_move_duration_ms: int = 1500,
        focus_min_zoom: float = 15.0,
    ) -> None:
        if not 0 <= min_zoom <= max_zoom < _ZOOM_MASK:
            raise ValueError(f"Zoom range must satisfy 0 <= min <= max < {_ZOOM_MASK}")
        self.radius = radius
        self.extent = extent
        self.min_points = min_points
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.node_size = node_size
        self.cluster_move_duration_ms = cluster_move_duration_ms
        self.focus_move_duration_ms = focus_move_duration_ms
        self.focus_min_zoom = focus_min_zoom
        self.issues: List[Issue] = []
        self._levels: dict[int, _Level] = {}
        self.load([])

    @classmethod
    def from_settings(cls, settings: MapSettings) -> "SpatialClusterer":
        """Build a clusterer from map settings."""
        return cls(
            radius=settings.cluster_radius,
            extent=settings.cluster_extent,
            min_points=settings.cluster_min_points,
            min_zoom=settings.min_zoom,
            max_zoom=settings.max_zoom,
            cluster_move_duration_ms=settings.cluster_move_duration_ms,
            focus_move_duration_ms=settings.focus_move_duration_ms,
            focus_min_zoom=settings.focus_min_zoom,
        )

    def load(self, issues: Sequence[Issue]) -> None:
        """(Re)build the cluster hierarchy for a set of issues.

        Args:
            issues: Issues to index; their order fixes marker order
        """
        with logfire.span("clusterer.load", count=len(issues)):
            self.issues = list(issues)
            nodes = [
                _Node(
                    x=lng_x(issue.location.longitude),
                    y=lat_y(issue.location.latitude),
                    zoom=math.inf,
                    ref=i,
                    parent=-1,
                    count=1,
                )
                for i, issue in enumerate(self.issues)
            ]
            self._levels = {self.max_zoom: _Level(nodes, self.node_size)}

            for zoom in range(self.max_zoom - 1, self.min_zoom - 1, -1):
                nodes = self._cluster(self._levels[zoom + 1], zoom)
                self._levels[zoom] = _Level(nodes, self.node_size)

    def _cluster(self, level: _Level, zoom: int) -> List[_Node]:
        r = self.radius / (self.extent * 2**zoom)
        nodes = level.nodes
        point_total = len(self.issues)
        next_nodes: List[_Node] = []

        for i, node in enumerate(nodes):
            # Already absorbed at this zoom
            if node.zoom <= zoom:
                continue
            node.zoom = zoom

            neighbor_ids = level.index.within(node.x, node.y, r)
            count = node.count
            for k in neighbor_ids:
                if nodes[k].zoom > zoom:
                    count += nodes[k].count

            if count > node.count and count >= self.min_points:
                wx = node.x * node.count
                wy = node.y * node.count
                cluster_id = (i << _ZOOM_BITS) + (zoom + 1) + point_total
                for k in neighbor_ids:
                    neighbor = nodes[k]
                    if neighbor.zoom <= zoom:
                        continue
                    neighbor.zoom = zoom
                    wx += neighbor.x * neighbor.count
                    wy += neighbor.y * neighbor.count
                    neighbor.parent = cluster_id
                node.parent = cluster_id
                next_nodes.append(
                    _Node(
                        x=wx / count,
                        y=wy / count,
                        zoom=math.inf,
                        ref=cluster_id,
                        parent=-1,
                        count=count,
                    )
                )
            else:
                next_nodes.append(_copy(node))
                if count > 1:
                    for k in neighbor_ids:
                        neighbor = nodes[k]
                        if neighbor.zoom <= zoom:
                            continue
                        neighbor.zoom = zoom
                        next_nodes.append(_copy(neighbor))
        return next_nodes

    def _limit_zoom(self, zoom: float) -> int:
        return max(self.min_zoom, min(math.floor(zoom), self.max_zoom))

    def _to_marker(self, node: _Node) -> Marker:
        if node.is_cluster:
            return ClusterMarker(
                cluster_id=node.ref,
                point=GeoPoint(latitude=y_lat(node.y), longitude=x_lng(node.x)),
                point_count=node.count,
            )
        issue = self.issues[node.ref]
        return IssueMarker(point=issue.location, issue=issue)

    def get_clusters(self, bounds: BoundingBox, zoom: float) -> List[Marker]:
        """Markers visible inside a viewport at a zoom level.

        Longitudes are wrapped into [-180, 180]; a box crossing the
        antimeridian is split into its eastern and western halves, and a
        box spanning 360 degrees or more covers the whole world.

        Args:
            bounds: Viewport bounds
            zoom: Map zoom (fractional zooms use the level below)

        Returns:
            Cluster and issue markers
        """
        min_lng = ((bounds.west + 180) % 360 + 360) % 360 - 180
        min_lat = max(-90.0, min(90.0, bounds.south))
        max_lng = (
            180.0
            if bounds.east == 180
            else ((bounds.east + 180) % 360 + 360) % 360 - 180
        )
        max_lat = max(-90.0, min(90.0, bounds.north))

        if bounds.east - bounds.west >= 360:
            min_lng, max_lng = -180.0, 180.0
        elif min_lng > max_lng:
            eastern = self.get_clusters(
                BoundingBox(west=min_lng, south=min_lat, east=180.0, north=max_lat),
                zoom,
            )
            western = self.get_clusters(
                BoundingBox(west=-180.0, south=min_lat, east=max_lng, north=max_lat),
                zoom,
            )
            return eastern + western

        level = self._levels[self._limit_zoom(zoom)]
        ids = level.index.range(
            lng_x(min_lng), lat_y(max_lat), lng_x(max_lng), lat_y(min_lat)
        )
        return [self._to_marker(level.nodes[k]) for k in ids]

    def _origin(self, cluster_id: int) -> tuple[int, int]:
        offset = cluster_id - len(self.issues)
        if offset < 0:
            raise NotFoundError("Cluster", str(cluster_id))
        return offset >> _ZOOM_BITS, offset & _ZOOM_MASK

    def get_children(self, cluster_id: int) -> List[Marker]:
        """Markers one zoom level below a cluster.

        Raises:
            NotFoundError: If the cluster id does not exist in the loaded index
        """
        origin_id, origin_zoom = self._origin(cluster_id)
        level = self._levels.get(origin_zoom)
        if level is None or origin_zoom <= self.min_zoom or origin_id >= len(level.nodes):
            raise NotFoundError("Cluster", str(cluster_id))

        r = self.radius / (self.extent * 2 ** (origin_zoom - 1))
        origin = level.nodes[origin_id]
        children = [
            self._to_marker(level.nodes[k])
            for k in level.index.within(origin.x, origin.y, r)
            if level.nodes[k].parent == cluster_id
        ]
        if not children:
            raise NotFoundError("Cluster", str(cluster_id))
        return children

    def get_leaves(
        self, cluster_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> List[Issue]:
        """Issues contained in a cluster, depth first.

        Args:
            cluster_id: Cluster id
            limit: Maximum number of issues (all when None)
            offset: Number of issues to skip

        Returns:
            Contained issues

        Raises:
            NotFoundError: If the cluster id does not exist
        """
        leaves: List[Issue] = []
        self._append_leaves(leaves, cluster_id)
        end = None if limit is None else offset + limit
        return leaves[offset:end]

    def _append_leaves(self, leaves: List[Issue], cluster_id: int) -> None:
        for child in self.get_children(cluster_id):
            if isinstance(child, ClusterMarker):
                self._append_leaves(leaves, child.cluster_id)
            else:
                leaves.append(child.issue)

    def get_expansion_zoom(self, cluster_id: int) -> int:
        """Lowest zoom at which a cluster splits into several markers.

        Never exceeds ``max_zoom``.

        Raises:
            NotFoundError: If the cluster id does not exist
        """
        expansion_zoom = self._origin(cluster_id)[1] - 1
        while expansion_zoom <= self.max_zoom:
            children = self.get_children(cluster_id)
            expansion_zoom += 1
            if len(children) != 1:
                break
            only = children[0]
            if not isinstance(only, ClusterMarker):
                break
            cluster_id = only.cluster_id
        return min(expansion_zoom, self.max_zoom)

    def get_cluster(self, cluster_id: int) -> ClusterMarker:
        """Look up the marker for a cluster id.

        Raises:
            NotFoundError: If the cluster id does not exist
        """
        zoom = self._origin(cluster_id)[1] - 1
        level = self._levels.get(zoom)
        if level is not None:
            for node in level.nodes:
                if node.is_cluster and node.ref == cluster_id:
                    return ClusterMarker(
                        cluster_id=node.ref,
                        point=GeoPoint(latitude=y_lat(node.y), longitude=x_lng(node.x)),
                        point_count=node.count,
                    )
        raise NotFoundError("Cluster", str(cluster_id))

    def expand_cluster(
        self, cluster_id: int, center: Optional[GeoPoint] = None
    ) -> CameraMove:
        """Camera move for a cluster click: fly to where it splits.

        Args:
            cluster_id: Clicked cluster
            center: Marker position (looked up when omitted)

        Returns:
            Camera move to the expansion zoom

        Raises:
            NotFoundError: If the cluster id does not exist
        """
        zoom = self.get_expansion_zoom(cluster_id)
        if center is None:
            center = self.get_cluster(cluster_id).point
        logfire.debug("Cluster expanded", cluster_id=cluster_id, zoom=zoom)
        return CameraMove(
            center=center, zoom=zoom, duration_ms=self.cluster_move_duration_ms
        )

    def focus_issue(self, issue: Issue, current_zoom: float) -> CameraMove:
        """Camera move for an issue click; never zooms an already-closer view out."""
        return CameraMove(
            center=issue.location,
            zoom=max(current_zoom, self.focus_min_zoom),
            duration_ms=self.focus_move_duration_ms,
        )


def _copy(node: _Node) -> _Node:
    return _Node(
        x=node.x,
        y=node.y,
        zoom=math.inf,
        ref=node.ref,
        parent=-1,
        count=node.count,
    )
