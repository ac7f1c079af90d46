"""
Mock Transcoder Implementation

Simulated transcoder supervisor for testing without a camera or FFmpeg.

This is a "Fake" (test double): processes have working lifecycle logic,
events arrive from background threads like real ones, and tests decide
when a process starts, exits, crashes or ignores its stop signal.
"""

import logging
import queue
import threading
import time
from pathlib import Path
from typing import List, Optional

from capture.constants import FFMPEG_SIGNAL_MARKER
from capture.errors import SubprocessError
from capture.interfaces.transcoder_interface import (
    CaptureParams,
    EventCallback,
    PreviewParams,
    ProcessEvent,
    TranscoderHandle,
    TranscoderInterface,
)

SIGTERM_RETURNCODE = -15
SIGKILL_RETURNCODE = -9


class MockProcess(TranscoderHandle):
    """
    Fake transcoder process.

    Usage:
        process = transcoder.last_process
        process.exit_normally()  # device EOF
        process.crash("No such device")  # device unplugged
    """

    _next_pid = 10000

    def __init__(
        self,
        kind: str,
        on_event: EventCallback,
        hang_on_terminate: bool = False,
        terminate_delay: float = 0.0,
    ):
        self.logger = logging.getLogger(__name__)
        self.kind = kind
        self._on_event = on_event
        self.hang_on_terminate = hang_on_terminate
        self.terminate_delay = terminate_delay

        MockProcess._next_pid += 1
        self.pid = MockProcess._next_pid

        self._lock = threading.Lock()
        self._exited = threading.Event()
        self._returncode: Optional[int] = None
        self._event: Optional[ProcessEvent] = None
        self._terminate_requested = False

        # Counters for test assertions
        self.terminate_count = 0
        self.kill_count = 0
        self.events: List[ProcessEvent] = []

        self._delivery: queue.Queue = queue.Queue()
        threading.Thread(
            target=self._delivery_loop,
            daemon=True,
            name=f"mock-{kind}-{self.pid}",
        ).start()

    # =========================================================================
    # TEST CONTROLS
    # =========================================================================

    def start(self):
        """Report startup (from a background thread)"""
        self._deliver(ProcessEvent.started(), final=False)

    def exit_normally(self):
        """Exit with code 0, as on device EOF"""
        self._finish(0)

    def crash(self, detail: str = "Input/output error", returncode: int = 1):
        """Exit with an error, as on device disconnect or encoder crash"""
        self._finish(returncode, detail)

    # =========================================================================
    # HANDLE API
    # =========================================================================

    def terminate(self) -> None:
        self.terminate_count += 1
        self._terminate_requested = True
        if self.hang_on_terminate:
            self.logger.debug(f"[MOCK] {self.kind} ignoring SIGTERM (PID: {self.pid})")
            return

        if self.terminate_delay:
            timer = threading.Timer(
                self.terminate_delay,
                self._finish,
                args=(SIGTERM_RETURNCODE, f"Exiting normally, {FFMPEG_SIGNAL_MARKER} 15."),
            )
            timer.daemon = True
            timer.start()
        else:
            self._finish(
                SIGTERM_RETURNCODE,
                f"Exiting normally, {FFMPEG_SIGNAL_MARKER} 15.",
            )

    def kill(self) -> None:
        self.kill_count += 1
        self._terminate_requested = True
        self._finish(SIGKILL_RETURNCODE)

    def is_running(self) -> bool:
        with self._lock:
            return self._returncode is None

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._exited.wait(timeout)

    @property
    def returncode(self) -> Optional[int]:
        return self._returncode

    @property
    def exit_reason(self):
        return self._event.reason if self._event else None

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _finish(self, returncode: int, stderr_text: str = ""):
        with self._lock:
            if self._returncode is not None:
                return
            self._returncode = returncode
            self._event = ProcessEvent.from_exit(
                returncode,
                stderr_text,
                terminate_requested=self._terminate_requested,
            )

        self.logger.debug(
            f"[MOCK] {self.kind} exited (PID: {self.pid}, code: {returncode})",
        )
        self._deliver(self._event, final=True)

    def _deliver(self, event: ProcessEvent, final: bool):
        self._delivery.put((event, final))

    def _delivery_loop(self):
        # One thread per process keeps events in order, like a real watcher
        while True:
            event, final = self._delivery.get()
            try:
                self.events.append(event)
                self._on_event(event)
            except Exception as e:
                self.logger.error(f"[MOCK] Error in event callback: {e}")
            finally:
                if final:
                    self._exited.set()
            if final:
                return


class MockTranscoder(TranscoderInterface):
    """
    Mock transcoder supervisor for testing.

    Usage:
        transcoder = MockTranscoder()
        coordinator = SessionCoordinator(transcoder=transcoder, ...)
        coordinator.start_capture("test")
        transcoder.last_process.crash("No such device")
    """

    def __init__(
        self,
        auto_start: bool = True,
        hang_on_terminate: bool = False,
        terminate_delay: float = 0.0,
        fail_launch: bool = False,
        write_files: bool = True,
    ):
        """
        Initialize mock transcoder.

        Args:
            auto_start: Report `started` right after every launch
            hang_on_terminate: Processes ignore SIGTERM (only kill stops them)
            terminate_delay: Seconds a process takes to exit after SIGTERM
            fail_launch: Every launch raises SubprocessError
            write_files: Create empty archive/preview files on launch
        """
        self.logger = logging.getLogger(__name__)
        self.auto_start = auto_start
        self.hang_on_terminate = hang_on_terminate
        self.terminate_delay = terminate_delay
        self.fail_launch = fail_launch
        self.write_files = write_files

        self.processes: List[MockProcess] = []
        self.launch_log: List[tuple] = []
        self.max_concurrent = 0
        self._lock = threading.Lock()

        self.logger.info("Mock Transcoder initialized")

    def launch_preview(
        self,
        device_path: str,
        capture_params: CaptureParams,
        preview_params: PreviewParams,
        preview_path: Path,
        on_event: EventCallback,
    ) -> TranscoderHandle:
        self._touch(preview_path)
        return self._launch("preview", on_event, time.monotonic())

    def launch_recording_with_preview(
        self,
        device_path: str,
        capture_params: CaptureParams,
        archive_path: Path,
        preview_params: PreviewParams,
        preview_path: Path,
        on_event: EventCallback,
    ) -> TranscoderHandle:
        self._touch(archive_path)
        self._touch(preview_path)
        return self._launch("recording", on_event, time.monotonic())

    def _launch(self, kind: str, on_event: EventCallback, launched_at: float) -> MockProcess:
        if self.fail_launch:
            raise SubprocessError("Failed to launch ffmpeg: simulated spawn failure")

        process = MockProcess(
            kind,
            on_event,
            hang_on_terminate=self.hang_on_terminate,
            terminate_delay=self.terminate_delay,
        )

        with self._lock:
            running = sum(1 for p in self.processes if p.is_running()) + 1
            self.max_concurrent = max(self.max_concurrent, running)
            self.processes.append(process)
            self.launch_log.append((kind, launched_at))

        self.logger.info(f"[MOCK] {kind} process launched (PID: {process.pid})")

        if self.auto_start:
            process.start()
        return process

    def _touch(self, path: Path):
        if self.write_files:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()

    def is_available(self) -> bool:
        return True

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    @property
    def last_process(self) -> Optional[MockProcess]:
        with self._lock:
            return self.processes[-1] if self.processes else None

    def get_processes(self, kind: str) -> List[MockProcess]:
        with self._lock:
            return [p for p in self.processes if p.kind == kind]

    def launch_count(self, kind: Optional[str] = None) -> int:
        with self._lock:
            return sum(1 for k, _ in self.launch_log if kind is None or k == kind)
