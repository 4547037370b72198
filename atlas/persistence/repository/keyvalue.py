"""JSON file implementation of the key-value store."""

import asyncio
import json
from pathlib import Path
from typing import Dict, Optional

import logfire

from atlas.domain.error import PersistenceError
from atlas.domain.repository import KeyValueStore


class FileKeyValueStore(KeyValueStore):
    """Key-value store persisted as a single JSON object on disk.

    Writes replace the file atomically (write to a sibling temp file, then
    rename). Access is serialized with an asyncio lock; the store is meant
    to be APP-scoped. File I/O runs in a worker thread so the event loop
    keeps serving the live map. Each write rewrites the whole file, which
    is fine for the small per-user ledgers and flags it holds.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: JSON file location (created on first write)
        """
        self.path = path
        self._lock = asyncio.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read key-value store: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError("Key-value store file must hold a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise PersistenceError(f"Cannot write key-value store: {e}") from e

    def _update(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    async def get(self, key: str) -> Optional[str]:
        """Read a value."""
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            return data.get(key)

    async def set(self, key: str, value: str) -> None:
        """Write a value."""
        async with self._lock:
            await asyncio.to_thread(self._update, key, value)
            logfire.debug("Key-value entry stored", key=key)
