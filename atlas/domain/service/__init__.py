"""Domain services."""

from .auth_service import IdentityProvider
from .base import Service
from .category_filter import CategoryFilter, distinct_categories, filter_by_categories
from .clustering import KDIndex, SpatialClusterer
from .geocoding_service import GeocodingClient, GeocodingService
from .issue_service import IssueService, NewIssue, placeholder_image_url
from .user_service import UserService, display_name_for

__all__ = [
    "CategoryFilter",
    "GeocodingClient",
    "GeocodingService",
    "IdentityProvider",
    "IssueService",
    "KDIndex",
    "NewIssue",
    "Service",
    "SpatialClusterer",
    "UserService",
    "display_name_for",
    "distinct_categories",
    "filter_by_categories",
    "placeholder_image_url",
]
