"""
Local persistence for the sync engine.

Provides the KeyValueStore protocol, the three record keys the engine uses,
and two implementations: an in-memory store and a JSON file store.
"""

from hidesync.core.storage.backend import AUTH_KEY, DATA_KEY, STATUS_KEY, KeyValueStore
from hidesync.core.storage.json_store import JsonFileStore
from hidesync.core.storage.memory import MemoryStore

__all__ = [
    "KeyValueStore",
    "JsonFileStore",
    "MemoryStore",
    "DATA_KEY",
    "AUTH_KEY",
    "STATUS_KEY",
]
