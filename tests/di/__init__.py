"""Mock providers for testing."""

from .geocoding import MockGeocodingProvider
from .identity import TEST_IDENTITIES, MockAuthenticationProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockAuthenticationProvider",
    "MockGeocodingProvider",
    "MockPersistenceProvider",
    "TEST_IDENTITIES",
    "build_test_container",
]
