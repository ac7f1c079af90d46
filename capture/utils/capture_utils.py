"""
Capture Utilities

Shared helpers for capture paths and resolutions.
"""

from pathlib import Path
from typing import Tuple

from config.settings import (
    LIVE_PREVIEW_DIRNAME,
    PREVIEW_FILENAME,
    RECORDING_PREVIEW_SUFFIX,
)


def parse_resolution(value: str) -> Tuple[int, int]:
    """
    Parse a WIDTHxHEIGHT string.

    Raises:
        ValueError: If the value is not two positive integers

    Example:
        parse_resolution("640x360") -> (640, 360)
    """
    try:
        width_text, height_text = value.lower().split("x")
        width, height = int(width_text), int(height_text)
    except ValueError:
        raise ValueError(f"Invalid resolution: {value!r} (expected WIDTHxHEIGHT)") from None

    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid resolution: {value!r} (must be positive)")
    return width, height


def get_live_preview_path(uploads_dir: Path) -> Path:
    """Still image written while previewing without recording"""
    return uploads_dir / LIVE_PREVIEW_DIRNAME / PREVIEW_FILENAME


def get_recording_preview_path(uploads_dir: Path, session_id: str) -> Path:
    """Still image written by the recording process of one session"""
    return uploads_dir / f"{session_id}{RECORDING_PREVIEW_SUFFIX}" / PREVIEW_FILENAME


def format_duration(seconds: float) -> str:
    """
    Format duration in seconds to human-readable string.

    Example:
        format_duration(630) -> "10:30"
        format_duration(3725) -> "1:02:05"
    """
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
