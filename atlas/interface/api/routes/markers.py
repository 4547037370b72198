"""Map routes."""

from typing import Optional

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query
from pydantic import ValidationError

from atlas.application.usecase.map import (
    ExpandClusterRequest,
    GetMarkersRequest,
    GetMarkersResponse,
    GetMarkersUseCase,
)
from atlas.domain.error import DomainError
from atlas.domain.model import CameraMove
from atlas.domain.value import BoundingBox
from atlas.interface.error import to_http_exception

router = APIRouter(prefix="/map", tags=["map"], route_class=DishkaRoute)


@router.get("/markers", response_model=GetMarkersResponse)
async def get_markers(
    get_markers_use_case: FromDishka[GetMarkersUseCase],
    west: float = Query(ge=-360, le=360),
    south: float = Query(ge=-90, le=90),
    east: float = Query(ge=-360, le=360),
    north: float = Query(ge=-90, le=90),
    zoom: float = Query(ge=0, le=24),
    category: list[str] = Query(default=[]),
) -> GetMarkersResponse:
    """Clustered markers for a viewport.

    ``west`` may exceed ``east`` when the viewport crosses the antimeridian.

    Example:
        GET /map/markers?west=-48.1&south=-16.1&east=-47.9&north=-15.9&zoom=13
    """
    try:
        bounds = BoundingBox(west=west, south=south, east=east, north=north)
    except ValidationError as e:
        raise to_http_exception(e)

    return await get_markers_use_case.execute(
        GetMarkersRequest(bounds=bounds, zoom=zoom, categories=category)
    )


@router.get("/clusters/{cluster_id}/expansion", response_model=CameraMove)
async def expand_cluster(
    cluster_id: int,
    get_markers_use_case: FromDishka[GetMarkersUseCase],
    category: list[str] = Query(default=[]),
    latitude: Optional[float] = Query(default=None, ge=-90, le=90),
    longitude: Optional[float] = Query(default=None, ge=-180, le=180),
) -> CameraMove:
    """Camera move that zooms in until the cluster splits.

    Cluster ids depend on the category selection, so the markers'
    ``category`` filter must be sent again. ``latitude``/``longitude`` are the
    marker position; they are looked up when omitted.

    Raises:
        HTTPException: 404 if the cluster id is unknown
    """
    try:
        return await get_markers_use_case.expand(
            ExpandClusterRequest(
                cluster_id=cluster_id,
                categories=category,
                latitude=latitude,
                longitude=longitude,
            )
        )
    except (DomainError, ValueError) as e:
        raise to_http_exception(e)
