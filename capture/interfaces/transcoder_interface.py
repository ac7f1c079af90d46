"""
Transcoder Interface

Abstract interface for the external transcoding process supervisor.
Follows Dependency Inversion Principle - the session coordinator depends
on this abstraction, not on FFmpeg directly.

Lifecycle is reported through one callback receiving ProcessEvent values:
    started -> ended(reason) | errored(reason, detail)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from capture.constants import EventKind, ExitReason, classify_exit
from capture.utils.capture_utils import parse_resolution
from config.settings import (
    PREVIEW_FRAMERATE,
    PREVIEW_QUALITY,
    PREVIEW_RESOLUTION,
    VIDEO_BITRATE,
    VIDEO_FRAMERATE,
    VIDEO_RESOLUTION,
)


@dataclass(frozen=True)
class CaptureParams:
    """Device read settings (and archive bitrate)"""

    resolution: str = VIDEO_RESOLUTION
    framerate: int = VIDEO_FRAMERATE
    bitrate: str = VIDEO_BITRATE

    def __post_init__(self):
        parse_resolution(self.resolution)


@dataclass(frozen=True)
class PreviewParams:
    """Scaled still-image preview settings"""

    resolution: str = PREVIEW_RESOLUTION
    framerate: int = PREVIEW_FRAMERATE
    quality: int = PREVIEW_QUALITY

    @property
    def size(self) -> tuple:
        return parse_resolution(self.resolution)


@dataclass(frozen=True)
class ProcessEvent:
    """
    One lifecycle event of a transcoder process.

    Attributes:
        kind: started, ended or errored
        reason: Exit classification (None for started)
        detail: Human-readable failure detail (stderr tail)
        returncode: Process exit code (None for started)
    """

    kind: EventKind
    reason: Optional[ExitReason] = None
    detail: str = ""
    returncode: Optional[int] = None

    @classmethod
    def started(cls) -> "ProcessEvent":
        return cls(kind=EventKind.STARTED)

    @classmethod
    def from_exit(
        cls,
        returncode: int,
        stderr_text: str = "",
        terminate_requested: bool = False,
    ) -> "ProcessEvent":
        """
        Build the terminal event for an exited process.

        A signaled exit counts as ended only when the supervisor asked for
        it; otherwise something else killed the process and it is an error.
        """
        reason = classify_exit(returncode, stderr_text, terminate_requested)

        if reason == ExitReason.NORMAL:
            kind = EventKind.ENDED
        elif reason == ExitReason.SIGNALED and terminate_requested:
            kind = EventKind.ENDED
        else:
            kind = EventKind.ERRORED

        detail = ""
        if kind == EventKind.ERRORED:
            detail = f"Transcoder exited with code {returncode}"
            if stderr_text:
                detail += f"\n\nFFmpeg stderr:\n{stderr_text}"

        return cls(kind=kind, reason=reason, detail=detail, returncode=returncode)


# Receives every ProcessEvent of one process, from its watcher thread
EventCallback = Callable[[ProcessEvent], None]


class TranscoderHandle(ABC):
    """
    Handle on one running transcoder process.
    """

    pid: Optional[int] = None

    @abstractmethod
    def is_running(self) -> bool:
        """True until the process has exited"""

    @abstractmethod
    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the process exited and its terminal event was delivered.

        Returns:
            True if it exited within timeout, False otherwise
        """

    @abstractmethod
    def terminate(self) -> None:
        """Send the graceful stop signal (non-blocking)"""

    @abstractmethod
    def kill(self) -> None:
        """Force the process to exit (non-blocking)"""

    @property
    @abstractmethod
    def returncode(self) -> Optional[int]:
        """Exit code, None while running"""

    @property
    @abstractmethod
    def exit_reason(self) -> Optional[ExitReason]:
        """Exit classification, None while running"""


class TranscoderInterface(ABC):
    """
    Abstract base class for transcoder supervisors.

    Each launch starts exactly one process that holds the capture device.
    Callers must never launch a second process before the first exited.
    """

    @abstractmethod
    def launch_preview(
        self,
        device_path: str,
        capture_params: CaptureParams,
        preview_params: PreviewParams,
        preview_path: Path,
        on_event: EventCallback,
    ) -> TranscoderHandle:
        """
        Start a preview process writing a continuously overwritten still.

        Raises:
            SubprocessError: If the process could not be spawned
        """

    @abstractmethod
    def launch_recording_with_preview(
        self,
        device_path: str,
        capture_params: CaptureParams,
        archive_path: Path,
        preview_params: PreviewParams,
        preview_path: Path,
        on_event: EventCallback,
    ) -> TranscoderHandle:
        """
        Start a recording process that also writes the preview still.

        The device is read once and split internally into the archive
        stream and the preview stream.

        Raises:
            SubprocessError: If the process could not be spawned
        """

    def terminate(self, handle: TranscoderHandle) -> None:
        """Graceful stop; completion is observed through on_event"""
        handle.terminate()

    def kill(self, handle: TranscoderHandle) -> None:
        """Forced stop after a graceful stop timed out"""
        handle.kill()

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the transcoder binary can be run.
        """
