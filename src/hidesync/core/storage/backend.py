"""
Local persistence protocol.

The sync engine persists three records (document, credentials, status)
through any object implementing KeyValueStore. Values are plain JSON
structures and must come back exactly as they were stored.
"""

from typing import Any, Protocol, runtime_checkable

DATA_KEY = "hideSync:data"
AUTH_KEY = "hideSync:auth"
STATUS_KEY = "hideSync:status"


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Protocol for durable key/value storage.

    Implementations must return copies, so that mutating a value after
    set() or after get() never changes what is stored.
    """

    async def get(self, key: str) -> Any | None:
        """
        Read a value.

        Args:
            key: Record key

        Returns:
            The stored value, or None if the key was never set
        """
        ...

    async def set(self, key: str, value: Any) -> None:
        """
        Write a value, replacing any previous one.

        Args:
            key: Record key
            value: JSON-serializable value
        """
        ...
