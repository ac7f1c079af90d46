"""
Process Handle

Wraps one transcoder subprocess and a watcher thread that turns its
lifecycle into ProcessEvent callbacks.
"""

import logging
import subprocess
import threading
from collections import deque
from typing import List, Optional

from capture.constants import ExitReason
from capture.errors import SubprocessError
from capture.interfaces.transcoder_interface import (
    EventCallback,
    ProcessEvent,
    TranscoderHandle,
)
from config.settings import STDERR_TAIL_LINES


class ProcessHandle(TranscoderHandle):
    """
    Running transcoder process.

    The watcher thread:
    1. Emits `started` once the process is spawned
    2. Drains stderr (keeping the last lines for error reports)
    3. Waits for exit, classifies it and emits `ended` or `errored`

    wait() returns only after the terminal event was delivered, so callers
    that wait never race the callback.
    """

    def __init__(
        self,
        command: List[str],
        on_event: EventCallback,
        name: str = "transcoder",
        stderr_tail_lines: int = STDERR_TAIL_LINES,
    ):
        """
        Spawn the process and start watching it.

        Raises:
            SubprocessError: If the executable cannot be started
        """
        self.logger = logging.getLogger(__name__)
        self.command = command
        self.name = name

        self._on_event = on_event
        self._stderr_tail: deque = deque(maxlen=stderr_tail_lines)
        self._exited = threading.Event()
        self._terminate_requested = False
        self._exit_reason: Optional[ExitReason] = None

        self.logger.debug(f"Launching {name}: {' '.join(command)}")

        try:
            self._process = subprocess.Popen(
                command,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,  # Never wait for keyboard input
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise SubprocessError(f"Failed to launch {command[0]}: {e}") from e

        self.pid = self._process.pid
        self.logger.info(f"{name} process started (PID: {self.pid})")

        self._watcher = threading.Thread(
            target=self._watch,
            daemon=True,
            name=f"{name}-watcher-{self.pid}",
        )
        self._watcher.start()

    def _watch(self):
        try:
            self._emit(ProcessEvent.started())

            # Reading to EOF keeps the pipe from filling up and blocking ffmpeg
            for line in self._process.stderr:
                line = line.rstrip()
                if line:
                    self._stderr_tail.append(line)
            self._process.stderr.close()

            returncode = self._process.wait()
            event = ProcessEvent.from_exit(
                returncode,
                self.stderr_text,
                terminate_requested=self._terminate_requested,
            )
            self._exit_reason = event.reason

            self.logger.info(
                f"{self.name} process exited "
                f"(PID: {self.pid}, code: {returncode}, reason: {event.reason.value})",
            )
            self._emit(event)
        finally:
            self._exited.set()

    def _emit(self, event: ProcessEvent):
        try:
            self._on_event(event)
        except Exception as e:
            self.logger.error(
                f"Error in {self.name} event callback ({event.kind.value}): {e}",
                exc_info=True,
            )

    @property
    def stderr_text(self) -> str:
        return "\n".join(self._stderr_tail)

    def is_running(self) -> bool:
        return self._process.poll() is None

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._exited.wait(timeout)

    def terminate(self) -> None:
        if self._exited.is_set():
            return
        self._terminate_requested = True
        try:
            self._process.terminate()
            self.logger.debug(f"Sent SIGTERM to {self.name} (PID: {self.pid})")
        except ProcessLookupError:
            self.logger.debug(f"{self.name} already gone (PID: {self.pid})")

    def kill(self) -> None:
        if self._exited.is_set():
            return
        self._terminate_requested = True
        try:
            self._process.kill()
            self.logger.warning(f"Sent SIGKILL to {self.name} (PID: {self.pid})")
        except ProcessLookupError:
            self.logger.debug(f"{self.name} already gone (PID: {self.pid})")

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode

    @property
    def exit_reason(self) -> Optional[ExitReason]:
        return self._exit_reason
