"""
SQLite Session Store

Persists session metadata in a SQLite database.
Single responsibility: Database operations only.
"""

import logging
import sqlite3
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from config.settings import SESSION_DB_NAME
from storage.interfaces.session_store_interface import (
    SessionStoreInterface,
    StorageError,
)
from storage.models.session import Session, serialize_fields

_COLUMNS = (
    "id",
    "filename",
    "filepath",
    "status",
    "start_time",
    "end_time",
    "duration",
    "notes",
    "uploaded",
    "upload_status",
    "remote_location",
    "upload_error",
    "error",
    "created_at",
    "updated_at",
)


class SQLiteSessionStore(SessionStoreInterface):
    """
    Session metadata in SQLite.

    Thread Safety:
    - Used from request threads, process watcher threads and the upload
      worker at the same time
    - READ operations run without locking
    - WRITE operations (insert, update) are serialized with threading.Lock
    """

    def __init__(self, storage_base: Path, db_name: str = SESSION_DB_NAME):
        """
        Initialize session store.

        Args:
            storage_base: Base storage directory (database goes here)
            db_name: Database file name
        """
        self.logger = logging.getLogger(__name__)
        storage_base.mkdir(parents=True, exist_ok=True)
        self.db_path = storage_base / db_name
        self._connection: Optional[sqlite3.Connection] = None

        # Serializes writes; SQLite handles read/write coordination
        self._write_lock = threading.Lock()

        self._initialize_db()

        self.logger.info(f"Session store initialized (db: {self.db_path})")

    def _initialize_db(self) -> None:
        """Create database and tables if they don't exist"""
        try:
            conn = self._get_connection()
            cursor = conn.cursor()

            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS sessions (
                    id TEXT PRIMARY KEY,
                    filename TEXT NOT NULL,
                    filepath TEXT NOT NULL,
                    status TEXT NOT NULL,
                    start_time TEXT NOT NULL,
                    end_time TEXT,
                    duration REAL,
                    notes TEXT DEFAULT '',
                    uploaded INTEGER DEFAULT 0,
                    upload_status TEXT DEFAULT 'pending',
                    remote_location TEXT,
                    upload_error TEXT,
                    error TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """,
            )

            cursor.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_sessions_created_at
                ON sessions(created_at)
            """,
            )

            conn.commit()
            self.logger.debug("Database schema initialized")

        except sqlite3.Error as e:
            raise StorageError(f"Failed to initialize database: {e}") from e

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection (reuses existing or creates new)"""
        if self._connection is None:
            try:
                # Shared across threads; writes are serialized by _write_lock
                self._connection = sqlite3.connect(
                    str(self.db_path),
                    check_same_thread=False,
                )
                self._connection.row_factory = sqlite3.Row
            except sqlite3.Error as e:
                raise StorageError(f"Failed to connect to database: {e}") from e

        return self._connection

    def insert(self, session: Session) -> Session:
        """
        Insert new session into database.

        Thread-safe: Uses lock to prevent concurrent inserts.
        """
        with self._write_lock:
            try:
                conn = self._get_connection()
                data = session.to_dict()
                data["uploaded"] = int(data["uploaded"])

                placeholders = ", ".join("?" for _ in _COLUMNS)
                conn.execute(
                    f"INSERT INTO sessions ({', '.join(_COLUMNS)}) "
                    f"VALUES ({placeholders})",
                    tuple(data[column] for column in _COLUMNS),
                )
                conn.commit()

                self.logger.debug(f"Inserted session: {session.id}")
                return session

            except sqlite3.IntegrityError as e:
                raise StorageError(f"Session already exists: {session.id}") from e
            except sqlite3.Error as e:
                raise StorageError(f"Failed to insert session: {e}") from e

    def update_status(self, session_id: str, fields: Dict[str, Any]) -> bool:
        """
        Update selected columns of a session.

        Column names come from the UPDATABLE_FIELDS whitelist (checked by
        serialize_fields), values are always bound as parameters.
        """
        row = serialize_fields(fields)
        row["updated_at"] = datetime.now().isoformat()

        assignments = ", ".join(f"{column} = ?" for column in row)
        params = [*row.values(), session_id]

        with self._write_lock:
            try:
                conn = self._get_connection()
                cursor = conn.execute(
                    f"UPDATE sessions SET {assignments} WHERE id = ?",
                    params,
                )
                conn.commit()

                if cursor.rowcount == 0:
                    self.logger.debug(f"No session to update: {session_id}")
                    return False

                self.logger.debug(
                    f"Updated session {session_id}: {', '.join(fields)}",
                )
                return True

            except sqlite3.Error as e:
                raise StorageError(f"Failed to update session: {e}") from e

    def find(self, session_id: str) -> Optional[Session]:
        try:
            conn = self._get_connection()
            cursor = conn.execute(
                "SELECT * FROM sessions WHERE id = ?",
                (session_id,),
            )
            row = cursor.fetchone()

            if row:
                return Session.from_dict(dict(row))
            return None

        except sqlite3.Error as e:
            raise StorageError(f"Failed to get session: {e}") from e

    def find_all(self, newest_first: bool = True) -> List[Session]:
        direction = "DESC" if newest_first else "ASC"
        try:
            conn = self._get_connection()
            cursor = conn.execute(
                f"SELECT * FROM sessions ORDER BY created_at {direction}",
            )
            return [Session.from_dict(dict(row)) for row in cursor.fetchall()]

        except sqlite3.Error as e:
            raise StorageError(f"Failed to list sessions: {e}") from e

    def find_failed_uploads(self) -> List[Session]:
        """Completed sessions whose upload failed, oldest first"""
        try:
            conn = self._get_connection()
            cursor = conn.execute(
                """
                SELECT * FROM sessions
                WHERE status = 'completed' AND upload_status = 'failed'
                ORDER BY created_at ASC
            """,
            )
            return [Session.from_dict(dict(row)) for row in cursor.fetchall()]

        except sqlite3.Error as e:
            raise StorageError(f"Failed to list failed uploads: {e}") from e

    def cleanup(self) -> None:
        """Close database connection"""
        if self._connection:
            try:
                self._connection.close()
                self._connection = None
                self.logger.debug("Database connection closed")
            except sqlite3.Error as e:
                self.logger.warning(f"Error closing database: {e}")
