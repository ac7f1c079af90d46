"""
Utilities Package

Device access guard and capture path helpers.
"""

from capture.utils.capture_utils import (
    format_duration,
    get_live_preview_path,
    get_recording_preview_path,
    parse_resolution,
)
from capture.utils.device_guard import check_device_access, probe_device

__all__ = [
    "check_device_access",
    "format_duration",
    "get_live_preview_path",
    "get_recording_preview_path",
    "parse_resolution",
    "probe_device",
]
