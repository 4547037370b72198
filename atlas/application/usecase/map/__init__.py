"""Map use cases."""

from .get_markers import (
    ExpandClusterRequest,
    GetMarkersRequest,
    GetMarkersResponse,
    GetMarkersUseCase,
)

__all__ = [
    "ExpandClusterRequest",
    "GetMarkersRequest",
    "GetMarkersResponse",
    "GetMarkersUseCase",
]
