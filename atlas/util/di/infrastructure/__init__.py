"""Infrastructure providers."""

# Import bases
from .geocoding import GeocodingProvider
from .identity import AuthenticationProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .geocoding import ProdGeocodingProvider  # noqa: F401
from .identity import ProdAuthenticationProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "AuthenticationProvider",
    "GeocodingProvider",
    "PersistenceProvider",
    "ProdAuthenticationProvider",
    "ProdGeocodingProvider",
    "ProdPersistenceProvider",
]
