# -*- coding: utf-8 -*-
"""State store module: the in-memory planner state and its persistence adapters."""
from .state_store import CONNECTION_FLAGS, EDITABLE_PROFILE_FIELDS, StateStore
from .storage_adapters import (
    SLOT_KEYS,
    InMemoryStorageAdapter,
    SQLiteStorageAdapter,
    StorageAdapter,
    StorageError,
)

__all__ = [
    "CONNECTION_FLAGS",
    "EDITABLE_PROFILE_FIELDS",
    "InMemoryStorageAdapter",
    "SLOT_KEYS",
    "SQLiteStorageAdapter",
    "StateStore",
    "StorageAdapter",
    "StorageError",
]
