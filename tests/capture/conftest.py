"""
Capture Test Configuration and Fixtures

Shared fixtures for capture module tests.
Coordinator tests run against MockTranscoder, MemorySessionStore and
MockUploader, so no camera, FFmpeg or network is needed.
"""

import threading
import time

import pytest

from capture.controllers.session_coordinator import SessionCoordinator
from capture.implementations.mock_transcoder import MockTranscoder
from storage.implementations.memory_store import MemorySessionStore
from upload.controllers.upload_dispatcher import UploadDispatcher
from upload.implementations.mock_uploader import MockUploader

# =============================================================================
# NOTIFICATION TRACKING
# =============================================================================


class EventRecorder:
    """
    Notifier double: records every publish() and lets tests wait for one.

    Usage:
        recorder.wait_for("captureStarted")
        assert recorder.count("captureEnded") == 1
    """

    def __init__(self):
        self.events = []
        self._cond = threading.Condition()

    def publish(self, name, payload):
        with self._cond:
            self.events.append((name, payload))
            self._cond.notify_all()

    def names(self):
        with self._cond:
            return [name for name, _ in self.events]

    def count(self, name):
        with self._cond:
            return sum(1 for event, _ in self.events if event == name)

    def payloads(self, name):
        with self._cond:
            return [payload for event, payload in self.events if event == name]

    def wait_for(self, name, count=1, timeout=2.0):
        with self._cond:
            return self._cond.wait_for(
                lambda: sum(1 for event, _ in self.events if event == name) >= count,
                timeout,
            )


def wait_until(predicate, timeout=2.0, interval=0.01):
    """Poll predicate until it is true or timeout expires"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


# =============================================================================
# COLLABORATOR FIXTURES
# =============================================================================


@pytest.fixture
def event_recorder():
    return EventRecorder()


@pytest.fixture(name="wait_until")
def wait_until_fixture():
    """Provide the polling helper to tests"""
    return wait_until


@pytest.fixture
def memory_store():
    store = MemorySessionStore()
    yield store
    store.cleanup()


@pytest.fixture
def mock_transcoder():
    """
    Provide MockTranscoder whose processes start immediately and exit
    promptly on SIGTERM.
    """
    return MockTranscoder()


@pytest.fixture
def mock_uploader():
    return MockUploader()


@pytest.fixture
def uploads_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


# =============================================================================
# COORDINATOR FIXTURES
# =============================================================================


@pytest.fixture
def make_coordinator(uploads_dir, memory_store, mock_transcoder, event_recorder, mock_uploader):
    """
    Build a SessionCoordinator with test collaborators.

    Keyword arguments override any constructor argument. Uploads run inline
    unless background_uploads=True is passed.

    Usage:
        def test_something(make_coordinator):
            coordinator = make_coordinator(preview_stop_timeout=0.2)
    """
    created = []

    def factory(**overrides):
        options = {
            "transcoder": mock_transcoder,
            "store": memory_store,
            "notifier": event_recorder,
            "dispatcher": UploadDispatcher(uploader=mock_uploader),
            "device_path": "/dev/video0",
            "uploads_dir": uploads_dir,
            "device_check": lambda device_path: None,
            "background_uploads": False,
        }
        options.update(overrides)
        coordinator = SessionCoordinator(**options)
        created.append(coordinator)
        return coordinator

    yield factory

    for coordinator in created:
        coordinator.shutdown(upload_timeout=2.0)


@pytest.fixture
def coordinator(make_coordinator):
    return make_coordinator()


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """
    Configure pytest with custom markers for capture tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "unit_integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
    config.addinivalue_line("markers", "requires_ffmpeg: Tests requiring FFmpeg")
