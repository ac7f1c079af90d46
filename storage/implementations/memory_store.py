"""
In-Memory Session Store

Session store kept in a dictionary.
Used by tests and by deployments that do not need history across restarts.
"""

import copy
import logging
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from storage.constants import SessionStatus, UploadOutcome
from storage.interfaces.session_store_interface import (
    SessionStoreInterface,
    StorageError,
)
from storage.models.session import Session, deserialize_fields, serialize_fields


class MemorySessionStore(SessionStoreInterface):
    """
    Session store for testing.

    Keeps copies of sessions so callers cannot mutate stored state by
    accident, and records every write for test verification.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

        # Track operations for test verification
        self.operation_log: List[str] = []

        self.logger.info("[MEMORY] Session store initialized")

    def _log_operation(self, operation: str) -> None:
        """Log operation for test verification"""
        self.operation_log.append(operation)
        self.logger.debug(f"[MEMORY] {operation}")

    def insert(self, session: Session) -> Session:
        with self._lock:
            if session.id in self._sessions:
                raise StorageError(f"Session already exists: {session.id}")
            self._sessions[session.id] = copy.deepcopy(session)
            self._log_operation(f"insert:{session.id}")
        return session

    def update_status(self, session_id: str, fields: Dict[str, Any]) -> bool:
        # Same validation and normalization as the SQLite store
        values = deserialize_fields(serialize_fields(fields))

        with self._lock:
            stored = self._sessions.get(session_id)
            if stored is None:
                return False
            stored.apply(values)
            stored.updated_at = datetime.now()
            self._log_operation(f"update:{session_id}:{','.join(sorted(fields))}")
        return True

    def find(self, session_id: str) -> Optional[Session]:
        with self._lock:
            stored = self._sessions.get(session_id)
            return copy.deepcopy(stored) if stored else None

    def find_all(self, newest_first: bool = True) -> List[Session]:
        with self._lock:
            sessions = [copy.deepcopy(s) for s in self._sessions.values()]
        return sorted(sessions, key=lambda s: s.created_at, reverse=newest_first)

    def find_failed_uploads(self) -> List[Session]:
        """Completed sessions whose upload failed, oldest first"""
        return [
            session
            for session in self.find_all(newest_first=False)
            if session.status == SessionStatus.COMPLETED
            and session.upload_status == UploadOutcome.FAILED
        ]

    def cleanup(self) -> None:
        self.logger.debug("[MEMORY] Session store cleanup")

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    def count_by_status(self, status: SessionStatus) -> int:
        """Number of stored sessions in the given status"""
        with self._lock:
            return sum(1 for s in self._sessions.values() if s.status == status)

    def get_write_count(self, session_id: Optional[str] = None) -> int:
        """Number of insert/update operations (optionally for one session)"""
        writes = [
            op for op in self.operation_log
            if op.startswith(("insert:", "update:"))
        ]
        if session_id is None:
            return len(writes)
        return sum(1 for op in writes if op.split(":")[1] == session_id)
