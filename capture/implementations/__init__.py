"""
Implementations Package

Concrete transcoder supervisors.
"""

from capture.implementations.ffmpeg_transcoder import FFmpegTranscoder
from capture.implementations.mock_transcoder import MockProcess, MockTranscoder
from capture.implementations.process_handle import ProcessHandle

__all__ = [
    "FFmpegTranscoder",
    "MockProcess",
    "MockTranscoder",
    "ProcessHandle",
]
