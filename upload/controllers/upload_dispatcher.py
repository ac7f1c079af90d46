"""
Upload Dispatcher

High-level coordinator for artifact uploads.
Gives the capture coordinator one call that transfers a finished recording
to the configured backend and reports the outcome.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from upload.factory import create_uploader
from upload.interfaces.uploader_interface import (
    UploadError,
    UploaderInterface,
    UploadResult,
)


class UploadDispatcher:
    """
    Pushes finished artifacts to exactly one backend.

    No retry happens here: a failed transfer is logged and re-raised so the
    caller can persist and surface it.

    Usage:
        dispatcher = UploadDispatcher()

        try:
            result = dispatcher.upload("/uploads/abc.mp4", "abc")
            print(result.location)
        except UploadError as e:
            print(f"Upload failed ({e.status.value}): {e}")
    """

    def __init__(self, uploader: Optional[UploaderInterface] = None):
        """
        Initialize upload dispatcher.

        Args:
            uploader: UploaderInterface implementation, or None to create
                one from settings
        """
        self.logger = logging.getLogger(__name__)

        self.uploader = uploader or create_uploader()

        if not self.uploader.is_available():
            self.logger.warning(
                "Uploader initialized but not available. "
                "Check upload settings and credentials.",
            )

        self.logger.info(
            f"Upload Dispatcher initialized (backend: {self.method})",
        )

    @property
    def method(self) -> str:
        return self.uploader.method

    def upload(self, artifact_path: Union[str, Path], session_id: str) -> UploadResult:
        """
        Upload one artifact.

        Args:
            artifact_path: Local path of the finished recording
            session_id: Session the artifact belongs to

        Returns:
            UploadResult with the remote locator

        Raises:
            UploadError: If the transfer failed (status tells why)
        """
        path = Path(artifact_path)
        self.logger.info(f"Uploading {path.name} for session {session_id}")

        try:
            result = self.uploader.upload_file(path, session_id)
        except UploadError as e:
            self.logger.error(
                f"Upload failed for session {session_id}: {e} "
                f"(status: {e.status.value})",
            )
            raise

        size_mb = result.file_size / (1024 * 1024)
        self.logger.info(
            f"Upload successful for session {session_id}: {result.location} "
            f"({result.upload_duration:.1f}s, {size_mb:.1f} MB)",
        )
        return result
