"""
Capture Utilities Tests

To run:
    pytest tests/capture/utils/test_capture_utils.py -v
"""

from pathlib import Path

import pytest

from capture.utils.capture_utils import (
    format_duration,
    get_live_preview_path,
    get_recording_preview_path,
    parse_resolution,
)


@pytest.mark.unit
def test_parse_resolution():
    assert parse_resolution("1920x1080") == (1920, 1080)
    assert parse_resolution("640X360") == (640, 360)


@pytest.mark.unit
@pytest.mark.parametrize("value", ["", "1920", "axb", "0x360", "640x-1", "1x2x3"])
def test_parse_resolution_rejects_invalid(value):
    with pytest.raises(ValueError):
        parse_resolution(value)


@pytest.mark.unit
def test_preview_paths():
    uploads = Path("/srv/uploads")

    assert get_live_preview_path(uploads) == uploads / "live_preview" / "preview.jpg"
    assert get_recording_preview_path(uploads, "abc") == uploads / "abc_preview" / "preview.jpg"


@pytest.mark.unit
def test_format_duration():
    assert format_duration(0) == "0:00"
    assert format_duration(630) == "10:30"
    assert format_duration(3725) == "1:02:05"
