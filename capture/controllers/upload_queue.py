"""
Upload Queue

Hands finished recordings to the upload step without holding the capture
state lock. One worker processes uploads oldest first, one at a time.
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

_STOP = object()


@dataclass(frozen=True)
class PendingUpload:
    """A finished artifact waiting for transfer"""

    session_id: str
    artifact_path: Path
    end_time: Optional[datetime] = None


class UploadQueue:
    """
    Background (or inline) runner for PendingUpload items.

    In background mode a daemon worker thread calls the handler for each
    item. In synchronous mode submit() calls the handler on the caller's
    thread and returns when it is done.
    """

    def __init__(
        self,
        handler: Callable[[PendingUpload], None],
        background: bool = True,
    ):
        self.logger = logging.getLogger(__name__)
        self.handler = handler
        self.background = background

        self._queue: queue.Queue = queue.Queue()
        self._worker: Optional[threading.Thread] = None
        self._lock = threading.Lock()

        # Items submitted but not finished yet
        self._pending = 0
        self._idle = threading.Condition(self._lock)

        self.logger.info(
            f"Upload queue initialized (mode: {'background' if background else 'inline'})",
        )

    def start(self):
        """Start the worker thread (background mode only)"""
        with self._lock:
            if not self.background or self._worker is not None:
                return
            self._worker = threading.Thread(
                target=self._worker_loop,
                daemon=True,
                name="UploadWorker",
            )
            self._worker.start()
        self.logger.info("Upload worker thread started")

    def submit(self, item: PendingUpload):
        """Queue one upload"""
        self.logger.info(f"Queueing upload for session {item.session_id}")

        with self._lock:
            self._pending += 1

        if not self.background:
            self._run(item)
            return

        self.start()
        self._queue.put(item)

    def pending_count(self) -> int:
        with self._lock:
            return self._pending

    def drain(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for every submitted upload to finish.

        Returns:
            True if the queue is empty, False on timeout
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._idle:
            while self._pending:
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    return False
                self._idle.wait(remaining)
        return True

    def shutdown(self, timeout: Optional[float] = None) -> bool:
        """Drain pending uploads, then stop the worker"""
        drained = self.drain(timeout)
        if not drained:
            self.logger.warning(
                f"Upload queue shutdown with {self.pending_count()} upload(s) unfinished",
            )

        worker = self._worker
        if worker is not None:
            self._queue.put(_STOP)
            worker.join(timeout=1.0)
            self._worker = None
            self.logger.info("Upload worker thread stopped")
        return drained

    def _worker_loop(self):
        while True:
            item = self._queue.get()
            if item is _STOP:
                break
            self._run(item)

    def _run(self, item: PendingUpload):
        try:
            self.handler(item)
        except Exception as e:
            self.logger.error(
                f"Upload worker error for session {item.session_id}: {e}",
                exc_info=True,
            )
        finally:
            with self._idle:
                self._pending -= 1
                self._idle.notify_all()
