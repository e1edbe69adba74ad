"""Persistent key-value stores used to keep drafts across restarts."""

from .base import KeyValueStore, MemoryKeyValueStore
from .sqlite import SqliteKeyValueStore

__all__ = ["KeyValueStore", "MemoryKeyValueStore", "SqliteKeyValueStore"]
