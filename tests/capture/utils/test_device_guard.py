"""
Device Guard Tests

Tests for the pre-flight device access probe.

To run:
    pytest tests/capture/utils/test_device_guard.py -v
"""

import errno
import os

import pytest

from capture.errors import DeviceUnavailableError
from capture.utils.device_guard import check_device_access, probe_device


@pytest.fixture
def fake_device(tmp_path):
    """A readable and writable file standing in for /dev/video0"""
    device = tmp_path / "video0"
    device.write_bytes(b"")
    return device


@pytest.mark.unit
def test_probe_accessible_device(fake_device):
    probe_device(str(fake_device))


@pytest.mark.unit
def test_probe_missing_device(tmp_path):
    with pytest.raises(OSError) as exc_info:
        probe_device(str(tmp_path / "video9"))

    assert exc_info.value.errno == errno.ENOENT


@pytest.mark.unit
def test_probe_denied_device(fake_device, monkeypatch):
    monkeypatch.setattr(os, "access", lambda path, mode: False)

    with pytest.raises(OSError) as exc_info:
        probe_device(str(fake_device))

    assert exc_info.value.errno == errno.EACCES


@pytest.mark.unit
def test_check_succeeds_without_sleeping(fake_device):
    sleeps = []

    check_device_access(str(fake_device), max_attempts=3, backoff=0.5, sleep=sleeps.append)

    assert sleeps == []


@pytest.mark.unit
def test_check_retries_then_fails(tmp_path):
    sleeps = []

    with pytest.raises(DeviceUnavailableError) as exc_info:
        check_device_access(
            str(tmp_path / "video9"),
            max_attempts=3,
            backoff=0.5,
            sleep=sleeps.append,
        )

    assert sleeps == [0.5, 0.5]
    assert isinstance(exc_info.value.cause, OSError)
    assert "Cannot access video device" in str(exc_info.value)


@pytest.mark.unit
def test_check_recovers_on_later_attempt(tmp_path):
    device = tmp_path / "video0"

    def sleep_and_plug_in(seconds):
        device.write_bytes(b"")

    check_device_access(str(device), max_attempts=3, backoff=0.1, sleep=sleep_and_plug_in)
