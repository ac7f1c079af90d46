"""
Capture Module

Coordinates the single capture device between live preview and recording,
supervises the FFmpeg process and hands finished recordings to upload.

Public API:
    - SessionCoordinator: Capture session state machine and commands
    - CaptureEvent: Notification names
    - create_transcoder: Factory function
    - Errors: ConflictError, DeviceUnavailableError, SubprocessError,
      NotCapturingError, NotPreviewingError

Usage:
    from capture import SessionCoordinator

    coordinator = SessionCoordinator(transcoder, store, notifier, dispatcher)
    result = coordinator.start_capture(notes="test")
    coordinator.stop_capture()
"""

from capture.constants import CaptureEvent
from capture.controllers.session_coordinator import SessionCoordinator
from capture.errors import (
    CaptureError,
    ConflictError,
    DeviceUnavailableError,
    NotCapturingError,
    NotPreviewingError,
    SubprocessError,
)
from capture.factory import CaptureFactory, create_transcoder

# Public API
__all__ = [
    "CaptureError",
    "CaptureEvent",
    "CaptureFactory",
    "ConflictError",
    "DeviceUnavailableError",
    "NotCapturingError",
    "NotPreviewingError",
    "SessionCoordinator",
    "SubprocessError",
    "create_transcoder",
]
