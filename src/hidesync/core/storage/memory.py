"""In-process KeyValueStore, used by tests and embedders without a disk."""

import copy
from typing import Any


class MemoryStore:
    """Dict-backed store. Values are deep-copied on the way in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def snapshot(self) -> dict[str, Any]:
        """Copy of everything stored, keyed by record key."""
        return copy.deepcopy(self._data)
