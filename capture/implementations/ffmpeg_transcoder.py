"""
FFmpeg Transcoder Implementation

Real transcoder supervisor running FFmpeg subprocesses.
This wraps FFmpeg to match our TranscoderInterface.
"""

import logging
import shutil
from pathlib import Path

from capture.constants import get_preview_command, get_recording_command
from capture.implementations.process_handle import ProcessHandle
from capture.interfaces.transcoder_interface import (
    CaptureParams,
    EventCallback,
    PreviewParams,
    TranscoderHandle,
    TranscoderInterface,
)
from config.settings import FFMPEG_BINARY, STDERR_TAIL_LINES


class FFmpegTranscoder(TranscoderInterface):
    """
    Transcoder supervisor using FFmpeg.

    Non-blocking - every launch returns as soon as the process is spawned;
    the rest of its life arrives through the on_event callback.

    Usage:
        transcoder = FFmpegTranscoder()
        handle = transcoder.launch_preview(
            "/dev/video0", CaptureParams(), PreviewParams(),
            Path("uploads/live_preview/preview.jpg"), on_event=print,
        )
        transcoder.terminate(handle)
        handle.wait(1.0)
    """

    def __init__(
        self,
        ffmpeg_binary: str = FFMPEG_BINARY,
        stderr_tail_lines: int = STDERR_TAIL_LINES,
    ):
        self.logger = logging.getLogger(__name__)
        self.ffmpeg_binary = ffmpeg_binary
        self.stderr_tail_lines = stderr_tail_lines

        self.logger.info(f"FFmpeg Transcoder initialized (binary: {ffmpeg_binary})")

    def launch_preview(
        self,
        device_path: str,
        capture_params: CaptureParams,
        preview_params: PreviewParams,
        preview_path: Path,
        on_event: EventCallback,
    ) -> TranscoderHandle:
        preview_path.parent.mkdir(parents=True, exist_ok=True)
        width, height = preview_params.size

        command = get_preview_command(
            device_path=device_path,
            preview_path=str(preview_path),
            resolution=capture_params.resolution,
            framerate=capture_params.framerate,
            preview_width=width,
            preview_height=height,
            preview_framerate=preview_params.framerate,
            preview_quality=preview_params.quality,
            ffmpeg_binary=self.ffmpeg_binary,
        )

        self.logger.info(f"Starting FFmpeg preview to: {preview_path}")
        return ProcessHandle(
            command,
            on_event,
            name="preview",
            stderr_tail_lines=self.stderr_tail_lines,
        )

    def launch_recording_with_preview(
        self,
        device_path: str,
        capture_params: CaptureParams,
        archive_path: Path,
        preview_params: PreviewParams,
        preview_path: Path,
        on_event: EventCallback,
    ) -> TranscoderHandle:
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        preview_path.parent.mkdir(parents=True, exist_ok=True)
        width, height = preview_params.size

        command = get_recording_command(
            device_path=device_path,
            archive_path=str(archive_path),
            preview_path=str(preview_path),
            resolution=capture_params.resolution,
            framerate=capture_params.framerate,
            preview_width=width,
            preview_height=height,
            preview_framerate=preview_params.framerate,
            preview_quality=preview_params.quality,
            bitrate=capture_params.bitrate,
            ffmpeg_binary=self.ffmpeg_binary,
        )

        self.logger.info(f"Starting FFmpeg recording to: {archive_path}")
        return ProcessHandle(
            command,
            on_event,
            name="recording",
            stderr_tail_lines=self.stderr_tail_lines,
        )

    def is_available(self) -> bool:
        return shutil.which(self.ffmpeg_binary) is not None
