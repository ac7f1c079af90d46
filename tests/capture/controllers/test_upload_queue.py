"""
Upload Queue Tests

Tests for the upload hand-off queue showing:
- Inline and background modes
- Oldest-first processing
- Drain and shutdown with timeouts
- Handler failures do not stop the worker

To run:
    pytest tests/capture/controllers/test_upload_queue.py -v
"""

import threading
import time
from pathlib import Path

import pytest

from capture.controllers.upload_queue import PendingUpload, UploadQueue


def _item(number):
    return PendingUpload(f"session-{number}", Path(f"/uploads/session-{number}.mp4"))


@pytest.mark.unit
def test_inline_mode_runs_on_caller_thread():
    seen = []
    upload_queue = UploadQueue(lambda item: seen.append(threading.current_thread()), background=False)

    upload_queue.submit(_item(1))

    assert seen == [threading.current_thread()]
    assert upload_queue.pending_count() == 0


@pytest.mark.unit
def test_background_mode_processes_in_order():
    seen = []
    upload_queue = UploadQueue(lambda item: seen.append(item.session_id))

    for number in range(5):
        upload_queue.submit(_item(number))

    assert upload_queue.drain(timeout=2.0) is True
    assert seen == [f"session-{number}" for number in range(5)]
    upload_queue.shutdown(timeout=1.0)


@pytest.mark.unit
def test_background_submit_does_not_block():
    release = threading.Event()
    upload_queue = UploadQueue(lambda item: release.wait(2.0))

    start = time.monotonic()
    upload_queue.submit(_item(1))
    elapsed = time.monotonic() - start

    assert elapsed < 0.5
    assert upload_queue.pending_count() == 1

    release.set()
    assert upload_queue.drain(timeout=2.0) is True
    upload_queue.shutdown(timeout=1.0)


@pytest.mark.unit
def test_drain_times_out_while_busy():
    release = threading.Event()
    upload_queue = UploadQueue(lambda item: release.wait(2.0))
    upload_queue.submit(_item(1))

    assert upload_queue.drain(timeout=0.1) is False

    release.set()
    assert upload_queue.shutdown(timeout=2.0) is True


@pytest.mark.unit
def test_handler_exception_does_not_stop_worker():
    seen = []

    def handler(item):
        if item.session_id == "session-1":
            raise RuntimeError("boom")
        seen.append(item.session_id)

    upload_queue = UploadQueue(handler)
    upload_queue.submit(_item(1))
    upload_queue.submit(_item(2))

    assert upload_queue.drain(timeout=2.0) is True
    assert seen == ["session-2"]
    assert upload_queue.pending_count() == 0
    upload_queue.shutdown(timeout=1.0)


@pytest.mark.unit
def test_shutdown_without_worker_is_noop():
    upload_queue = UploadQueue(lambda item: None)

    assert upload_queue.shutdown(timeout=0.1) is True
