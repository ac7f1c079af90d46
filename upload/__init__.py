"""
Upload Module

Transfers finished recordings to one configured remote backend
(SFTP, S3 or local-only).

Public API:
    - UploadDispatcher: High-level upload coordinator
    - UploadResult: Upload operation result
    - UploadError: Raised when a transfer fails
    - UploadStatus: Status codes
    - create_uploader: Factory function

Usage:
    from upload import UploadDispatcher

    dispatcher = UploadDispatcher()
    result = dispatcher.upload("/uploads/abc.mp4", session_id="abc")
"""

from upload.constants import UploadMethod, UploadStatus
from upload.controllers.upload_dispatcher import UploadDispatcher
from upload.factory import create_uploader
from upload.interfaces.uploader_interface import UploadError, UploadResult

# Public API
__all__ = [
    "UploadDispatcher",
    "UploadError",
    "UploadMethod",
    "UploadResult",
    "UploadStatus",
    "create_uploader",
]
