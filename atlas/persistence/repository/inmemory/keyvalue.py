"""In-memory key-value store for testing."""

from typing import Optional

from atlas.domain.repository import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """In-memory implementation of KeyValueStore for testing."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        """Read a value."""
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        """Write a value."""
        self._values[key] = value
