"""
Mock Uploader Implementation

Simulated backend for testing without a remote server.
"""

import logging
import threading
import time
from pathlib import Path
from typing import Optional

from upload.constants import UploadMethod, UploadStatus
from upload.interfaces.uploader_interface import (
    UploadError,
    UploaderInterface,
    UploadResult,
)


class MockUploader(UploaderInterface):
    """
    Mock upload backend for testing.

    Useful for:
    - Unit tests
    - Development without SFTP/S3 credentials
    - Exercising the upload failure path
    """

    method = UploadMethod.MOCK.value

    def __init__(
        self,
        should_fail: bool = False,
        delay: float = 0.0,
        error_status: UploadStatus = UploadStatus.NETWORK_ERROR,
    ):
        """
        Initialize mock uploader.

        Args:
            should_fail: If True, every upload raises UploadError
            delay: Seconds each upload takes
            error_status: Status carried by the simulated failure

        Example:
            # Fast mock for unit tests
            uploader = MockUploader()

            # Test error handling
            uploader = MockUploader(should_fail=True)
        """
        self.logger = logging.getLogger(__name__)
        self.should_fail = should_fail
        self.delay = delay
        self.error_status = error_status

        # Track upload history for testing
        self.upload_history: list[dict] = []
        self._lock = threading.Lock()

        self.logger.info(
            f"Mock Uploader initialized (fail: {should_fail}, delay: {delay}s)",
        )

    def upload_file(self, artifact_path: Path, session_id: str) -> UploadResult:
        start_time = time.time()

        if self.delay:
            time.sleep(self.delay)

        with self._lock:
            self.upload_history.append(
                {
                    "artifact_path": str(artifact_path),
                    "session_id": session_id,
                    "timestamp": start_time,
                },
            )

        if self.should_fail:
            self.logger.error(f"[MOCK] Simulated upload failure: {session_id}")
            raise UploadError("Simulated upload failure", status=self.error_status)

        location = f"mock://uploads/{session_id}/{artifact_path.name}"
        self.logger.info(f"[MOCK] Upload successful: {location}")

        return UploadResult(
            success=True,
            location=location,
            method=self.method,
            upload_duration=time.time() - start_time,
        )

    def is_available(self) -> bool:
        """Mock uploader is always available"""
        return True

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    def get_upload_count(self) -> int:
        with self._lock:
            return len(self.upload_history)

    def get_last_upload(self) -> Optional[dict]:
        with self._lock:
            return self.upload_history[-1] if self.upload_history else None

    def was_uploaded(self, session_id: str) -> bool:
        with self._lock:
            return any(r["session_id"] == session_id for r in self.upload_history)
