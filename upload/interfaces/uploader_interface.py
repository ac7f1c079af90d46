"""
Uploader Interface

Abstract interface for artifact upload backends.
Follows Dependency Inversion Principle - the dispatcher depends on this
abstraction, not on paramiko or boto3 directly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from upload.constants import UploadStatus


@dataclass
class UploadResult:
    """
    Result of a successful upload.

    Attributes:
        success: True if upload completed successfully
        location: Remote locator (URL or path) of the uploaded artifact
        method: Backend that performed the transfer
        status: Upload status code
        upload_duration: Time taken to upload in seconds
        file_size: Size of uploaded file in bytes
    """

    success: bool
    location: Optional[str] = None
    method: str = ""
    status: UploadStatus = UploadStatus.SUCCESS
    upload_duration: float = 0.0
    file_size: int = 0


class UploaderInterface(ABC):
    """
    Abstract base class for upload backends.

    Any backend (SFTP, S3, local-only, ...) must implement these methods.
    """

    method: str = ""

    @abstractmethod
    def upload_file(self, artifact_path: Path, session_id: str) -> UploadResult:
        """
        Transfer one artifact to the remote target.

        No retry happens here; failures are reported to the caller.

        Args:
            artifact_path: Local path of the finished recording
            session_id: Session the artifact belongs to (used to namespace
                the remote location)

        Returns:
            UploadResult with the remote locator

        Raises:
            UploadError: On connection, authentication or transfer failure
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the backend is configured well enough to attempt uploads.
        """


class UploadError(Exception):
    """
    Exception raised for upload-related errors.

    Examples:
    - Authentication failed
    - Network error
    - Artifact missing
    - Backend not configured
    """

    def __init__(self, message: str, status: UploadStatus = UploadStatus.FAILED):
        super().__init__(message)
        self.status = status


def validate_artifact(artifact_path: Path) -> int:
    """
    Check the artifact exists before opening a remote session.

    Returns:
        File size in bytes

    Raises:
        UploadError: If the file is missing
    """
    if not artifact_path.is_file():
        raise UploadError(
            f"Artifact not found: {artifact_path}",
            status=UploadStatus.INVALID_FILE,
        )
    return artifact_path.stat().st_size
