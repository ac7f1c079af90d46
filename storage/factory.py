"""
Storage Factory

Factory pattern for creating session store implementations.
Follows the same pattern as capture/factory.py and upload/factory.py.
"""

import logging
from pathlib import Path
from typing import Literal, Optional

from config.settings import SESSION_STORE_MODE, UPLOADS_DIR
from storage.implementations.memory_store import MemorySessionStore
from storage.implementations.sqlite_store import SQLiteSessionStore
from storage.interfaces.session_store_interface import SessionStoreInterface

# Type alias for better type hints
StoreMode = Literal["sqlite", "memory"]


class StorageFactory:
    """
    Factory for creating session stores.

    Usage:
        # From settings (SQLite under UPLOADS_DIR by default)
        store = StorageFactory.create_store()

        # In-memory store (useful for testing)
        store = StorageFactory.create_store(mode="memory")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_store(
        cls,
        mode: Optional[StoreMode] = None,
        storage_base: Optional[Path] = None,
    ) -> SessionStoreInterface:
        """
        Create a session store.

        Args:
            mode: "sqlite" or "memory" (None = SESSION_STORE_MODE setting)
            storage_base: Directory holding the database (None = UPLOADS_DIR)

        Returns:
            SessionStoreInterface implementation

        Raises:
            ValueError: If mode is unknown
        """
        mode = mode or SESSION_STORE_MODE

        if mode == "memory":
            cls._logger.info("Creating in-memory session store")
            return MemorySessionStore()

        if mode == "sqlite":
            base = storage_base or UPLOADS_DIR
            cls._logger.info(f"Creating SQLite session store in {base}")
            return SQLiteSessionStore(base)

        raise ValueError(f"Unknown session store mode: {mode}")


# Convenience function for quick creation


def create_store(
    force_memory: bool = False,
    storage_base: Optional[Path] = None,
) -> SessionStoreInterface:
    """
    Quick store creation with simple in-memory override.

    Example:
        # Normal usage
        store = create_store()

        # Testing
        store = create_store(force_memory=True)
    """
    mode: Optional[StoreMode] = "memory" if force_memory else None
    return StorageFactory.create_store(mode=mode, storage_base=storage_base)
