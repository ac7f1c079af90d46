"""
Capture Errors

Exceptions raised by the capture session coordinator and the transcoder
supervisor. Every rejected command raises one of these with a
human-readable message.
"""

from typing import Optional


class CaptureError(Exception):
    """Base exception for capture errors"""


class ConflictError(CaptureError):
    """Command is not valid in the current capture mode"""


class DeviceUnavailableError(CaptureError):
    """Capture device failed its access probe on every attempt"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class SubprocessError(CaptureError):
    """Transcoder process failed to spawn or crashed"""

    def __init__(self, detail: str, returncode: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        self.returncode = returncode


class NotCapturingError(CaptureError):
    """Stop requested while no recording is active"""


class NotPreviewingError(CaptureError):
    """Preview stop requested while no preview is active"""
