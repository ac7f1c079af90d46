"""
Local-Only Uploader Implementation

Backend used when no remote target is configured.
The artifact stays where the recorder wrote it.
"""

import logging
from pathlib import Path

from upload.constants import UploadMethod
from upload.interfaces.uploader_interface import UploaderInterface, UploadResult


class LocalUploader(UploaderInterface):
    """No-op backend: always succeeds with the artifact path as locator"""

    method = UploadMethod.LOCAL.value

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.logger.info("Local-only uploader initialized (no remote transfer)")

    def upload_file(self, artifact_path: Path, session_id: str) -> UploadResult:
        self.logger.info(
            f"Local storage only - no upload for session {session_id}",
        )
        return UploadResult(
            success=True,
            location=str(artifact_path),
            method=self.method,
        )

    def is_available(self) -> bool:
        return True
