"""
Storage Module

Session metadata persistence for the capture station.

Architecture:
- interfaces/: Abstract base classes (contracts)
- implementations/: Concrete implementations (SQLite and in-memory)
- models/: Data structures
"""

from storage.constants import SessionStatus, UploadOutcome
from storage.factory import StorageFactory, create_store
from storage.implementations.memory_store import MemorySessionStore
from storage.implementations.sqlite_store import SQLiteSessionStore
from storage.interfaces.session_store_interface import (
    SessionStoreInterface,
    StorageError,
)
from storage.models.session import Session

# Public API - what users import
__all__ = [
    "MemorySessionStore",
    "SQLiteSessionStore",
    "Session",
    "SessionStatus",
    "SessionStoreInterface",
    "StorageError",
    "StorageFactory",
    "UploadOutcome",
    "create_store",
]
