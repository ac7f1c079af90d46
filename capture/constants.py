"""
Capture Constants

Notification names, lifecycle enums and the FFmpeg command builders.
Tunable values (resolutions, timeouts, codec settings) live in
config/settings.py.
"""

from enum import Enum
from typing import Optional

from config.settings import (
    FFMPEG_BINARY,
    FFMPEG_LOG_LEVEL,
    VIDEO_BITRATE,
    VIDEO_CODEC,
    VIDEO_CRF,
    VIDEO_INPUT_FORMAT,
    VIDEO_PRESET,
)

# =============================================================================
# NOTIFICATIONS
# =============================================================================


class CaptureEvent(Enum):
    """Event names published on the notification channel"""

    PREVIEW_STARTED = "previewStarted"
    PREVIEW_ERROR = "previewError"
    PREVIEW_STOPPED = "previewStopped"
    CAPTURE_STARTED = "captureStarted"
    CAPTURE_ERROR = "captureError"
    CAPTURE_ENDED = "captureEnded"
    UPLOAD_COMPLETE = "uploadComplete"
    UPLOAD_ERROR = "uploadError"


# =============================================================================
# PROCESS LIFECYCLE
# =============================================================================


class EventKind(Enum):
    """Lifecycle event delivered by a transcoder process"""

    STARTED = "started"
    ENDED = "ended"
    ERRORED = "errored"


class ExitReason(Enum):
    """How a transcoder process exited"""

    NORMAL = "normal"  # exit code 0
    SIGNALED = "signaled"  # killed by a signal or exited on one
    ERROR = "error"  # any other failure


# FFmpeg exits with 255 when it stops on SIGTERM/SIGINT
FFMPEG_SIGNAL_EXIT_CODE = 255
FFMPEG_SIGNAL_MARKER = "received signal"

# Input queue absorbs USB frame delivery jitter
THREAD_QUEUE_SIZE = 512


def classify_exit(
    returncode: int,
    stderr_text: str = "",
    terminate_requested: bool = False,
) -> ExitReason:
    """
    Classify a transcoder exit.

    Args:
        returncode: Popen return code (negative when killed by a signal)
        stderr_text: Tail of the process stderr
        terminate_requested: Whether the supervisor sent the stop signal

    Returns:
        ExitReason

    Example:
        classify_exit(0) -> ExitReason.NORMAL
        classify_exit(-15) -> ExitReason.SIGNALED
        classify_exit(1, "No such device") -> ExitReason.ERROR
    """
    if returncode == 0:
        return ExitReason.NORMAL
    if returncode < 0:
        return ExitReason.SIGNALED
    if terminate_requested and (
        FFMPEG_SIGNAL_MARKER in stderr_text or returncode == FFMPEG_SIGNAL_EXIT_CODE
    ):
        return ExitReason.SIGNALED
    return ExitReason.ERROR


# =============================================================================
# FFMPEG COMMANDS
# =============================================================================


def _input_args(
    device_path: str,
    resolution: str,
    framerate: int,
    low_latency: bool = False,
) -> list[str]:
    args = [
        "-f",
        VIDEO_INPUT_FORMAT,
        "-framerate",
        str(framerate),
        "-video_size",
        resolution,
        "-thread_queue_size",
        str(THREAD_QUEUE_SIZE),
    ]
    if low_latency:
        args.extend(
            [
                "-use_wallclock_as_timestamps",
                "1",
                "-fflags",
                "nobuffer",
                "-flags",
                "low_delay",
            ],
        )
    args.extend(["-i", device_path])
    return args


def _preview_output_args(quality: int, framerate: Optional[int]) -> list[str]:
    args = []
    if framerate:
        args.extend(["-r", str(framerate)])
    args.extend(
        [
            "-q:v",
            str(quality),
            # Keep overwriting the same still image
            "-update",
            "1",
        ],
    )
    return args


def get_preview_command(
    device_path: str,
    preview_path: str,
    resolution: str,
    framerate: int,
    preview_width: int,
    preview_height: int,
    preview_framerate: Optional[int] = None,
    preview_quality: int = 5,
    ffmpeg_binary: str = FFMPEG_BINARY,
) -> list[str]:
    """
    Build the live-preview command.

    Reads the device and keeps overwriting one scaled JPEG.

    Example:
        cmd = get_preview_command(
            "/dev/video0", "/uploads/live_preview/preview.jpg",
            "1920x1080", 30, 640, 360,
        )
    """
    command = [
        ffmpeg_binary,
        "-nostdin",
        "-hide_banner",
        "-loglevel",
        FFMPEG_LOG_LEVEL,
        "-y",
    ]
    command.extend(_input_args(device_path, resolution, framerate))
    command.extend(["-vf", f"scale={preview_width}:{preview_height}"])
    command.extend(_preview_output_args(preview_quality, preview_framerate))
    command.append(preview_path)
    return command


def get_recording_command(
    device_path: str,
    archive_path: str,
    preview_path: str,
    resolution: str,
    framerate: int,
    preview_width: int,
    preview_height: int,
    preview_framerate: Optional[int] = None,
    preview_quality: int = 5,
    bitrate: str = VIDEO_BITRATE,
    ffmpeg_binary: str = FFMPEG_BINARY,
) -> list[str]:
    """
    Build the recording command with a split preview.

    One device read is split into the archival H.264 stream and the
    scaled preview still, so the device is opened exactly once.
    """
    filter_graph = (
        f"split=2[rec][prev];[prev]scale={preview_width}:{preview_height}[scaled]"
    )

    command = [
        ffmpeg_binary,
        "-nostdin",
        "-hide_banner",
        "-loglevel",
        FFMPEG_LOG_LEVEL,
        "-y",
    ]
    command.extend(_input_args(device_path, resolution, framerate, low_latency=True))
    command.extend(["-filter_complex", filter_graph])

    # Archive output (full quality)
    command.extend(
        [
            "-map",
            "[rec]",
            "-c:v",
            VIDEO_CODEC,
            "-preset",
            VIDEO_PRESET,
            "-crf",
            str(VIDEO_CRF),
            "-maxrate",
            bitrate,
            "-bufsize",
            bitrate,
            "-pix_fmt",
            "yuv420p",
            # Fragmented MP4 stays playable when stopped with a signal
            "-movflags",
            "+frag_keyframe+empty_moov",
            "-fflags",
            "+genpts",
            "-avoid_negative_ts",
            "make_zero",
            archive_path,
        ],
    )

    # Preview output (low resolution, same file overwritten)
    command.extend(["-map", "[scaled]"])
    command.extend(_preview_output_args(preview_quality, preview_framerate))
    command.append(preview_path)
    return command
