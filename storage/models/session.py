"""
Session Model

Data class representing one recording attempt and its metadata.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from storage.constants import TERMINAL_STATUSES, SessionStatus, UploadOutcome

# Fields callers may change through SessionStoreInterface.update_status()
UPDATABLE_FIELDS = (
    "status",
    "end_time",
    "duration",
    "notes",
    "uploaded",
    "upload_status",
    "remote_location",
    "upload_error",
    "error",
)

_DATETIME_FIELDS = ("start_time", "end_time", "created_at", "updated_at")


def new_session_id() -> str:
    """Generate a unique, immutable session identifier"""
    return str(uuid.uuid4())


@dataclass
class Session:
    """
    One recording attempt.

    Lifecycle: recording -> completed | error. The end time is written
    exactly once, together with the terminal status.
    """

    # Identification
    id: str
    filename: str  # <session id>.mp4
    filepath: Path  # Full path to the archival artifact

    # Lifecycle
    status: SessionStatus = SessionStatus.RECORDING
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None
    duration: Optional[float] = None  # seconds, set with end_time

    # Free text, editable in any status
    notes: str = ""

    # Upload tracking
    uploaded: bool = False
    upload_status: UploadOutcome = UploadOutcome.PENDING
    remote_location: Optional[str] = None
    upload_error: Optional[str] = None

    # Transcoder failure detail
    error: Optional[str] = None

    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        """Ensure filepath is a Path object"""
        if not isinstance(self.filepath, Path):
            self.filepath = Path(self.filepath)

    @classmethod
    def create(
        cls,
        uploads_dir: Path,
        notes: str = "",
        extension: str = ".mp4",
    ) -> "Session":
        """Create a new session in status recording"""
        session_id = new_session_id()
        filename = f"{session_id}{extension}"
        now = datetime.now()
        return cls(
            id=session_id,
            filename=filename,
            filepath=uploads_dir / filename,
            start_time=now,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_recording(self) -> bool:
        return self.status == SessionStatus.RECORDING

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def mark_completed(self, end_time: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Finalize as completed.

        Returns:
            The changed fields, ready for update_status()

        Raises:
            ValueError: If the session already reached a terminal status
        """
        self._finish(SessionStatus.COMPLETED, end_time)
        return {
            "status": self.status,
            "end_time": self.end_time,
            "duration": self.duration,
        }

    def mark_error(
        self,
        detail: str,
        end_time: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Finalize as error with the transcoder failure detail"""
        self._finish(SessionStatus.ERROR, end_time)
        self.error = detail
        return {
            "status": self.status,
            "end_time": self.end_time,
            "duration": self.duration,
            "error": detail,
        }

    def mark_upload_succeeded(self, location: str) -> Dict[str, Any]:
        self.uploaded = True
        self.upload_status = UploadOutcome.SUCCEEDED
        self.remote_location = location
        self.upload_error = None
        self.updated_at = datetime.now()
        return {
            "uploaded": True,
            "upload_status": self.upload_status,
            "remote_location": location,
            "upload_error": None,
        }

    def mark_upload_failed(self, error: str) -> Dict[str, Any]:
        self.uploaded = False
        self.upload_status = UploadOutcome.FAILED
        self.upload_error = error
        self.updated_at = datetime.now()
        return {
            "uploaded": False,
            "upload_status": self.upload_status,
            "upload_error": error,
        }

    def _finish(self, status: SessionStatus, end_time: Optional[datetime]) -> None:
        if self.is_terminal or self.end_time is not None:
            raise ValueError(
                f"Session {self.id} already finalized ({self.status.value})",
            )
        self.end_time = end_time or datetime.now()
        self.duration = (self.end_time - self.start_time).total_seconds()
        self.status = status
        self.updated_at = datetime.now()

    def apply(self, fields: Dict[str, Any]) -> None:
        """Apply an update_status() field dict to this instance"""
        for name, value in fields.items():
            if name not in UPDATABLE_FIELDS:
                raise ValueError(f"Field not updatable: {name}")
            setattr(self, name, value)
        self.updated_at = datetime.now()

    def to_dict(self) -> dict:
        """Convert to dictionary for database storage and notifications"""
        return {
            "id": self.id,
            "filename": self.filename,
            "filepath": str(self.filepath),
            "status": self.status.value,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration": self.duration,
            "notes": self.notes,
            "uploaded": self.uploaded,
            "upload_status": self.upload_status.value,
            "remote_location": self.remote_location,
            "upload_error": self.upload_error,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        """Create Session from dictionary (database row)"""
        return cls(
            id=data["id"],
            filename=data["filename"],
            filepath=Path(data["filepath"]),
            status=SessionStatus(data["status"]),
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=(
                datetime.fromisoformat(data["end_time"])
                if data.get("end_time")
                else None
            ),
            duration=data.get("duration"),
            notes=data.get("notes") or "",
            uploaded=bool(data.get("uploaded", False)),
            upload_status=UploadOutcome(data.get("upload_status", "pending")),
            remote_location=data.get("remote_location"),
            upload_error=data.get("upload_error"),
            error=data.get("error"),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )

    def __repr__(self) -> str:
        """Human-readable representation"""
        return (
            f"Session(id='{self.id}', "
            f"status={self.status.value}, "
            f"upload={self.upload_status.value})"
        )


def serialize_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert an update_status() field dict to storable primitives.

    Enums become their values, datetimes ISO strings, booleans ints.

    Raises:
        ValueError: If a field is not updatable
    """
    row: Dict[str, Any] = {}
    for name, value in fields.items():
        if name not in UPDATABLE_FIELDS:
            raise ValueError(f"Field not updatable: {name}")
        if isinstance(value, (SessionStatus, UploadOutcome)):
            value = value.value
        elif isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, bool):
            value = int(value)
        row[name] = value
    return row


def deserialize_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Inverse of serialize_fields() for in-memory stores"""
    result: Dict[str, Any] = {}
    for name, value in fields.items():
        if name == "status" and isinstance(value, str):
            value = SessionStatus(value)
        elif name == "upload_status" and isinstance(value, str):
            value = UploadOutcome(value)
        elif name in _DATETIME_FIELDS and isinstance(value, str):
            value = datetime.fromisoformat(value)
        elif name == "uploaded":
            value = bool(value)
        result[name] = value
    return result
