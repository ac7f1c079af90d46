"""
Device Access Guard

Pre-flight check that the capture device can be opened for reading and
writing. Never opens a streaming session itself: the transcoder process
does that.
"""

import errno
import logging
import os
import time
from typing import Callable

from capture.errors import DeviceUnavailableError
from config.settings import DEVICE_CHECK_ATTEMPTS, DEVICE_CHECK_BACKOFF

logger = logging.getLogger(__name__)


def probe_device(device_path: str) -> None:
    """
    Non-destructive read/write probe.

    Raises:
        OSError: With the errno describing why the device is unusable
    """
    if not os.path.exists(device_path):
        raise OSError(errno.ENOENT, os.strerror(errno.ENOENT), device_path)
    if not os.access(device_path, os.R_OK | os.W_OK):
        raise OSError(errno.EACCES, os.strerror(errno.EACCES), device_path)


def check_device_access(
    device_path: str,
    max_attempts: int = DEVICE_CHECK_ATTEMPTS,
    backoff: float = DEVICE_CHECK_BACKOFF,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """
    Probe the device, retrying after a fixed backoff.

    Args:
        device_path: Capture device (e.g., /dev/video0)
        max_attempts: Probes before giving up
        backoff: Seconds between probes
        sleep: Sleep function (tests pass a fake)

    Raises:
        DeviceUnavailableError: After max_attempts failed probes; `cause`
            holds the last OSError
    """
    attempts = max(1, max_attempts)
    last_error = None

    for attempt in range(1, attempts + 1):
        try:
            probe_device(device_path)
            if attempt > 1:
                logger.info(f"Device {device_path} accessible after {attempt} attempts")
            return
        except OSError as e:
            last_error = e
            logger.warning(
                f"Device access check failed ({attempt}/{attempts}): {e}",
            )
            if attempt < attempts:
                sleep(backoff)

    raise DeviceUnavailableError(
        f"Cannot access video device {device_path}: {last_error}. "
        f"Make sure no other application is using it.",
        cause=last_error,
    )
