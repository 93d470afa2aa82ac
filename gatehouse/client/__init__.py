"""Client-side session helper for talking to a Gatehouse server."""

from .session import ClientSession
from .storage import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "ClientSession",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
]
