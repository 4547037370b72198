"""Key-value storage interface."""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """Simple string key-value storage.

    Holds per-user upvote ledgers and the tutorial flag.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Read a value.

        Args:
            key: Storage key

        Returns:
            Stored value, or None if the key is absent
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Write a value.

        Args:
            key: Storage key
            value: Value to store
        """
        pass
