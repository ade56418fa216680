"""
File-backed KeyValueStore.

All records live in one JSON object file, mirroring the flat key space of
browser extension storage. Writes are atomic (write to a temp file in the
same directory, then rename) so a crash mid-write never corrupts state.

Example:
    store = JsonFileStore(Path("~/.local/share/hide-sync/state.json").expanduser())
    await store.set("hideSync:status", {"syncEnabled": False})
    status = await store.get("hideSync:status")
"""

import asyncio
import json
import logging
import tempfile
from pathlib import Path
from typing import Any

from hidesync.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class JsonFileStore:
    """
    Key/value store persisted as a single JSON file.

    File I/O runs in a worker thread so the event loop is never blocked.
    An asyncio.Lock serializes read-modify-write cycles within the process.
    """

    def __init__(self, path: Path) -> None:
        """
        Initialize store for a state file.

        Args:
            path: JSON file holding all records (created on first write)
        """
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_all)
        return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_all)
            data[key] = value
            await asyncio.to_thread(self._write_all, data)
        logger.debug("Persisted %s to %s", key, self.path)

    def _read_all(self) -> dict[str, Any]:
        """
        Load every record from disk.

        Returns:
            Mapping of key to value (empty if the file doesn't exist yet)

        Raises:
            StorageError: If the file can't be read or isn't a JSON object
        """
        if not self.path.exists():
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(
                f"Failed to read state file {self.path}", path=str(self.path), error=str(e)
            ) from e

        if not isinstance(data, dict):
            raise StorageError(
                f"State file {self.path} does not contain a JSON object", path=str(self.path)
            )
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        """
        Write every record to disk atomically.

        Raises:
            StorageError: If the file can't be written
        """
        tmp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.path.parent,
                delete=False,
                suffix=".tmp",
            ) as tmp:
                tmp_path = Path(tmp.name)
                json.dump(data, tmp, indent=2, ensure_ascii=False)
                tmp.flush()
            tmp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise StorageError(
                f"Failed to write state file {self.path}", path=str(self.path), error=str(e)
            ) from e
