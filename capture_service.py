"""
Capture Service

Main service process for the video capture system.
Wires the session coordinator to its collaborators and drives it from a
control file.

Architecture:
- SessionCoordinator owns the device (preview / recording state machine)
- EventBus carries notifications; this service logs each one and writes
  a JSON state snapshot for clients that connect later
- Control file accepts operator commands (see scripts/remote_control.py)
- Uploads run on the coordinator's background queue

Control Commands:
    PREVIEW                 Start live preview
    STOP_PREVIEW            Stop live preview
    START [notes]           Start recording (stops preview first)
    STOP                    Stop recording
    NOTES <session id> <text>
    STATUS                  Log current state
"""

import json
import logging
import logging.handlers
import os
import signal
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from capture import CaptureError, CaptureFactory, SessionCoordinator
from config.settings import (
    CONTROL_FILE,
    CONTROL_POLL_INTERVAL,
    LOG_BACKUP_DAYS,
    LOG_DIR,
    LOG_SERVICE_FILE,
    STATE_FILE,
)
from core import ALL_EVENTS, EventBus
from storage import StorageError


class CaptureService:
    """
    Service wrapper around the session coordinator.

    Usage:
        service = CaptureService()
        service.run()  # Blocks until shutdown
    """

    def __init__(
        self,
        coordinator: Optional[SessionCoordinator] = None,
        event_bus: Optional[EventBus] = None,
        control_file: str = CONTROL_FILE,
        state_file: str = STATE_FILE,
    ):
        """Initialize coordinator and subscribe to notifications."""
        self.logger = logging.getLogger(__name__)
        self.logger.info("Initializing Capture Service...")

        self.running = False
        self.start_time = time.time()

        self.control_file = Path(control_file)
        self.state_file = Path(state_file)

        self.event_bus = event_bus or EventBus()
        self.coordinator = coordinator or CaptureFactory.create_coordinator(
            notifier=self.event_bus,
        )

        self.last_event: Optional[Dict[str, Any]] = None
        self.event_bus.subscribe(ALL_EVENTS, self._on_notification)

        self.logger.info("Capture Service initialized")

    def run(self):
        """
        Main service loop.

        Runs until shutdown signal received.
        """
        self.running = True
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        self.logger.info("Starting Capture Service main loop...")
        self._write_state_snapshot()

        try:
            while self.running:
                self._check_control_commands()
                time.sleep(CONTROL_POLL_INTERVAL)
        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        finally:
            self._shutdown()

    # =========================================================================
    # NOTIFICATIONS
    # =========================================================================

    def _on_notification(self, event: str, payload: Dict[str, Any]):
        """Log every notification and refresh the state snapshot"""
        if event.endswith("Error"):
            self.logger.error(f"Event {event}: {payload}")
        else:
            self.logger.info(f"Event {event}: {payload}")

        self.last_event = {
            "event": event,
            "payload": payload,
            "timestamp": datetime.now().isoformat(),
        }
        self._write_state_snapshot()

    def _write_state_snapshot(self):
        """
        Write the capture state as JSON.

        Atomic write (temp file, then rename) so readers never see a
        partial file.
        """
        try:
            snapshot = {
                "timestamp": datetime.now().isoformat(),
                "uptime_seconds": time.time() - self.start_time,
                "pid": os.getpid(),
                "state": self.coordinator.current_state(),
                "upload_queue_size": self.coordinator.upload_queue.pending_count(),
                "last_event": self.last_event,
            }

            tmp_file = self.state_file.with_suffix(".tmp")
            tmp_file.write_text(json.dumps(snapshot, indent=2, default=str))
            tmp_file.replace(self.state_file)

        except OSError as e:
            # Snapshot is for observers; capture keeps running without it
            self.logger.warning(f"Failed to write state snapshot: {e}")

    # =========================================================================
    # CONTROL COMMANDS
    # =========================================================================

    def _check_control_commands(self):
        """
        Check for and process remote control commands.

        The control file is deleted as soon as it is read so a command
        never runs twice.
        """
        if not self.control_file.exists():
            return

        try:
            command = self.control_file.read_text().strip()
            self.control_file.unlink()
        except OSError as e:
            self.logger.error(f"Failed to read control command: {e}")
            return

        if not command:
            return

        self.logger.info(f"Remote command received: {command}")
        self._process_remote_command(command)

    def _process_remote_command(self, command: str):
        """
        Process a specific remote command.

        Args:
            command: Command line (keyword is case-insensitive, arguments
                are kept as typed)
        """
        keyword, _, argument = command.strip().partition(" ")
        keyword = keyword.upper()
        argument = argument.strip()

        try:
            if keyword == "PREVIEW":
                self.coordinator.start_preview()
                self.logger.info("Remote PREVIEW → preview started")

            elif keyword == "STOP_PREVIEW":
                result = self.coordinator.stop_preview()
                if result["success"]:
                    self.logger.info("Remote STOP_PREVIEW → preview stopped")
                else:
                    self.logger.warning(f"Remote STOP_PREVIEW ignored - {result['error']}")

            elif keyword == "START":
                result = self.coordinator.start_capture(notes=argument)
                self.logger.info(
                    f"Remote START → recording session {result['session_id']}",
                )

            elif keyword == "STOP":
                result = self.coordinator.stop_capture()
                self.logger.info(
                    f"Remote STOP → session {result['session_id']} "
                    f"({result['duration']:.1f}s)",
                )

            elif keyword == "NOTES":
                session_id, _, text = argument.partition(" ")
                if not session_id:
                    self.logger.warning("Remote NOTES ignored - session id required")
                elif self.coordinator.update_notes(session_id, text.strip()):
                    self.logger.info(f"Remote NOTES → session {session_id} updated")
                else:
                    self.logger.warning(f"Remote NOTES ignored - unknown session {session_id}")

            elif keyword == "STATUS":
                state = self.coordinator.current_state()
                session = state["current_session"]
                self.logger.info(
                    f"Remote STATUS → mode: {state['mode']}, "
                    f"session: {session['id'] if session else None}, "
                    f"upload queue: {self.coordinator.upload_queue.pending_count()}",
                )

            else:
                self.logger.warning(f"Unknown remote command: {keyword}")

        except (CaptureError, StorageError) as e:
            self.logger.warning(f"Remote {keyword} rejected: {e}")

    # =========================================================================
    # SHUTDOWN HANDLING
    # =========================================================================

    def _signal_handler(self, signum, _frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            _frame: Current stack frame (unused, required by signal API)
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received signal {signal_name}, shutting down...")
        self.running = False

    def _shutdown(self):
        """
        Graceful shutdown.

        Stops recording or preview and waits for pending uploads.
        """
        self.logger.info("Shutting down Capture Service...")

        if not self.coordinator.shutdown():
            self.logger.warning("Uploads still pending at shutdown")

        self.coordinator.store.cleanup()
        self._write_state_snapshot()

        self.logger.info("Capture Service shutdown complete")


def _rotating_handler(path: Path) -> logging.Handler:
    """Midnight-rotating file handler keeping LOG_BACKUP_DAYS files."""
    return logging.handlers.TimedRotatingFileHandler(
        str(path),
        when="midnight",
        backupCount=LOG_BACKUP_DAYS,
        encoding="utf-8",
    )


def setup_logging():
    """
    Send INFO and above to stdout and to a daily-rotated log file.

    Falls back to ./logs when LOG_DIR cannot be written.
    """
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s | %(name)s")

    handlers = [logging.StreamHandler(sys.stdout)]

    log_file = Path(LOG_DIR) / LOG_SERVICE_FILE
    fallback_used = False
    try:
        handlers.append(_rotating_handler(log_file))
    except (PermissionError, FileNotFoundError):
        Path("logs").mkdir(exist_ok=True)
        handlers.append(_rotating_handler(Path("logs") / LOG_SERVICE_FILE))
        fallback_used = True

    for handler in handlers:
        handler.setLevel(logging.INFO)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if fallback_used:
        root.warning(f"{LOG_DIR} not writable, logging to ./logs/{LOG_SERVICE_FILE}")


def main():
    """
    Main entry point for the service.

    Sets up logging and runs the service.
    """
    setup_logging()

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("Video Capture Service Starting")
    logger.info("=" * 60)

    try:
        service = CaptureService()
        service.run()
    except Exception as e:
        logger.critical(f"Fatal error in main: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
