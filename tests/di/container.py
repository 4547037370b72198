"""Test container builder with selective unmocking."""

from dishka import AsyncContainer

from atlas.util.di import Component
from atlas.util.di.container import build_container, mockable_components


def build_test_container(unmock: set[Component] | None = None) -> AsyncContainer:
    """Build test container with selective unmocking.

    Settings are loaded from environment variables.

    Args:
        unmock: Components to use production implementations for.
                All others use mocks.

    Returns:
        Configured test container

    Raises:
        ValueError: If unknown components are requested

    Examples:
        # Unit tests - all mocks
        container = build_test_container()

        # Integration tests - real PostgreSQL
        container = build_test_container(unmock={"persistence"})
    """
    unmock = unmock or set()
    components = mockable_components()

    unknown = unmock - components
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")

    return build_container(mocked=components - unmock)
