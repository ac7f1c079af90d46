"""
Session Store Interface

Abstract interface for session persistence following Dependency Inversion
Principle. The capture coordinator depends on this interface, not on a
concrete database.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from storage.models.session import Session


class SessionStoreInterface(ABC):
    """
    Abstract base class for session persistence.

    Any store implementation must provide these methods.
    This allows easy swapping between the SQLite store and the in-memory
    store used by tests.
    """

    @abstractmethod
    def insert(self, session: Session) -> Session:
        """
        Persist a new session.

        Args:
            session: Session to insert

        Returns:
            The inserted session

        Raises:
            StorageError: If the id already exists or the write fails
        """

    @abstractmethod
    def update_status(self, session_id: str, fields: Dict[str, Any]) -> bool:
        """
        Update some fields of an existing session.

        `updated_at` is maintained by the store.

        Args:
            session_id: Session identifier
            fields: Field name -> new value (see UPDATABLE_FIELDS)

        Returns:
            True if a session matched, False otherwise

        Raises:
            StorageError: If the write fails
            ValueError: If a field is not updatable
        """

    @abstractmethod
    def find(self, session_id: str) -> Optional[Session]:
        """
        Get a session by id.

        Returns:
            Session or None if not found
        """

    @abstractmethod
    def find_all(self, newest_first: bool = True) -> List[Session]:
        """
        List every session sorted by creation time.

        Args:
            newest_first: Sort by created_at descending when True
        """

    @abstractmethod
    def cleanup(self) -> None:
        """
        Release store resources (close database connections, etc.).
        """


class StorageError(Exception):
    """
    Custom exception for storage-related errors.

    Makes it easy to catch storage-specific errors:
        except StorageError as e:
            logger.error(f"Storage failed: {e}")
    """
