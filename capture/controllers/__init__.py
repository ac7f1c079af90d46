"""
Controllers Package

Capture session coordination and upload hand-off.
"""

from capture.controllers.session_coordinator import SessionCoordinator
from capture.controllers.upload_queue import PendingUpload, UploadQueue

__all__ = [
    "PendingUpload",
    "SessionCoordinator",
    "UploadQueue",
]
