"""
Session Coordinator

Owns the capture device. Decides whether the transcoder runs a preview,
a recording (with its own preview feed) or nothing, and turns process
lifecycle events into session updates and notifications.

Responsibilities:
- Capture mode state machine (idle / previewing / recording + stopping)
- Device access check before every recording
- Transcoder launch, graceful stop with bounded wait, forced kill
- Session persistence and upload hand-off
- Notifications on every transition

Threading:
- Commands (start/stop) are serialized by _command_lock, end to end
- Mode, handle and current session are guarded by _state_lock; process
  event handlers take only this lock
- Stops release _state_lock while waiting for the process, so its exit
  event can be handled (and ignored) meanwhile
- Notifications are published after _state_lock is released
"""

import logging
import threading
from functools import partial
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from capture.constants import CaptureEvent, EventKind
from capture.controllers.upload_queue import PendingUpload, UploadQueue
from capture.errors import (
    ConflictError,
    DeviceUnavailableError,
    NotCapturingError,
    NotPreviewingError,
    SubprocessError,
)
from capture.interfaces.transcoder_interface import (
    CaptureParams,
    PreviewParams,
    ProcessEvent,
    TranscoderHandle,
    TranscoderInterface,
)
from capture.utils.capture_utils import (
    get_live_preview_path,
    get_recording_preview_path,
)
from capture.utils.device_guard import check_device_access
from config.settings import (
    BACKGROUND_UPLOADS,
    FORCE_KILL_ON_STOP_TIMEOUT,
    PREVIEW_STOP_TIMEOUT,
    RECORDING_STOP_TIMEOUT,
    UPLOAD_DRAIN_TIMEOUT,
    UPLOADS_DIR,
    VIDEO_CAPTURE_DEVICE,
    VIDEO_FILENAME_EXTENSION,
)
from core.state_machine import CaptureMode, StateMachine
from storage.interfaces.session_store_interface import (
    SessionStoreInterface,
    StorageError,
)
from storage.models.session import Session
from upload.constants import UploadStatus
from upload.controllers.upload_dispatcher import UploadDispatcher
from upload.interfaces.uploader_interface import UploadError

# Seconds to wait for a process after SIGKILL
KILL_WAIT_TIMEOUT = 0.5

Notification = Tuple[CaptureEvent, Dict[str, Any]]


class SessionCoordinator:
    """
    Capture session coordinator.

    Usage:
        coordinator = SessionCoordinator(
            transcoder=FFmpegTranscoder(),
            store=create_store(),
            notifier=EventBus(),
            dispatcher=UploadDispatcher(),
        )

        coordinator.start_preview()
        result = coordinator.start_capture(notes="warmup drills")
        coordinator.stop_capture()
    """

    def __init__(
        self,
        transcoder: TranscoderInterface,
        store: SessionStoreInterface,
        notifier,
        dispatcher: UploadDispatcher,
        device_path: str = VIDEO_CAPTURE_DEVICE,
        uploads_dir: Path = UPLOADS_DIR,
        capture_params: Optional[CaptureParams] = None,
        preview_params: Optional[PreviewParams] = None,
        device_check: Callable[[str], None] = check_device_access,
        preview_stop_timeout: float = PREVIEW_STOP_TIMEOUT,
        recording_stop_timeout: float = RECORDING_STOP_TIMEOUT,
        force_kill: bool = FORCE_KILL_ON_STOP_TIMEOUT,
        background_uploads: bool = BACKGROUND_UPLOADS,
    ):
        """
        Initialize session coordinator.

        Args:
            transcoder: Transcoder supervisor (FFmpeg or mock)
            store: Session persistence
            notifier: Anything with publish(event_name, payload)
            dispatcher: Upload dispatcher for finished recordings
            device_path: Capture device
            uploads_dir: Where artifacts and preview stills are written
            capture_params: Device read settings
            preview_params: Preview still settings
            device_check: Pre-flight probe, raises DeviceUnavailableError
            preview_stop_timeout: Bounded wait when stopping a preview
            recording_stop_timeout: Bounded wait when stopping a recording
            force_kill: Kill the process when a bounded wait expires
            background_uploads: Upload on a worker thread instead of inline
        """
        self.logger = logging.getLogger(__name__)

        self.transcoder = transcoder
        self.store = store
        self.notifier = notifier
        self.dispatcher = dispatcher

        self.device_path = device_path
        self.uploads_dir = Path(uploads_dir)
        self.capture_params = capture_params or CaptureParams()
        self.preview_params = preview_params or PreviewParams()
        self.device_check = device_check
        self.preview_stop_timeout = preview_stop_timeout
        self.recording_stop_timeout = recording_stop_timeout
        self.force_kill = force_kill

        self.state_machine = StateMachine()
        self.upload_queue = UploadQueue(
            self._process_upload,
            background=background_uploads,
        )

        self._command_lock = threading.Lock()
        self._state_lock = threading.RLock()

        # Current process, guarded by _state_lock
        self._handle: Optional[TranscoderHandle] = None
        self._session: Optional[Session] = None
        self._preview_path: Optional[Path] = None

        # Bumped on every launch and cleanup; events carry the value they
        # were launched with, anything older is stale
        self._generation = 0

        self.logger.info(
            f"Session Coordinator initialized "
            f"(device: {device_path}, uploads: {self.uploads_dir}, "
            f"upload: {dispatcher.method})",
        )

    # =========================================================================
    # PREVIEW
    # =========================================================================

    def start_preview(self) -> Dict[str, Any]:
        """
        Start the live preview.

        Returns:
            {"success": True}

        Raises:
            ConflictError: If already previewing or capturing
            SubprocessError: If the transcoder could not be spawned
        """
        with self._command_lock:
            with self._state_lock:
                if not self.state_machine.is_idle():
                    raise ConflictError("Already previewing or capturing")

                preview_path = get_live_preview_path(self.uploads_dir)
                generation = self._next_generation()
                self.state_machine.transition_to(CaptureMode.PREVIEWING, "preview requested")

                try:
                    handle = self.transcoder.launch_preview(
                        self.device_path,
                        self.capture_params,
                        self.preview_params,
                        preview_path,
                        on_event=partial(self._on_preview_event, generation),
                    )
                except SubprocessError as e:
                    self.logger.error(f"Preview launch failed: {e}")
                    self._next_generation()
                    self.state_machine.transition_to(CaptureMode.IDLE, "preview launch failed")
                    raise

                self._handle = handle
                self._preview_path = preview_path

        return {"success": True}

    def stop_preview(self, require_active: bool = False) -> Dict[str, Any]:
        """
        Stop the live preview.

        Resolves when the process exits or the preview stop timeout
        expires, whichever comes first.

        Args:
            require_active: Raise instead of returning a failure result
                when nothing is previewing

        Returns:
            {"success": True}, or {"success": False, "error": "Not previewing"}

        Raises:
            NotPreviewingError: If require_active and not previewing
        """
        with self._command_lock:
            return self._stop_preview_locked(require_active)

    def _stop_preview_locked(self, require_active: bool = False) -> Dict[str, Any]:
        with self._state_lock:
            handle = self._handle
            if not self.state_machine.is_previewing() or handle is None:
                if require_active:
                    raise NotPreviewingError("Not previewing")
                return {"success": False, "error": "Not previewing"}

            self.logger.info("Stopping preview...")
            self.state_machine.transition_to(CaptureMode.PREVIEW_STOPPING, "stop requested")
            self.transcoder.terminate(handle)

        exited = self._await_exit(handle, self.preview_stop_timeout, "preview")

        with self._state_lock:
            self._clear_current()
            self.state_machine.transition_to(
                CaptureMode.IDLE,
                "preview stopped" if exited else "preview stop timed out",
            )

        self._publish(CaptureEvent.PREVIEW_STOPPED, {})
        return {"success": True}

    def _on_preview_event(self, generation: int, event: ProcessEvent):
        notification: Optional[Notification] = None

        with self._state_lock:
            if generation != self._generation:
                self.logger.debug(f"Ignoring stale preview event: {event.kind.value}")
                return

            mode = self.state_machine.current_state

            if event.kind == EventKind.STARTED:
                if mode == CaptureMode.PREVIEWING:
                    self.logger.info("Preview started")
                    notification = (CaptureEvent.PREVIEW_STARTED, {})

            elif mode == CaptureMode.PREVIEW_STOPPING:
                # Expected result of our own SIGTERM
                self.logger.debug(
                    f"Preview stopped (intentional): {event.kind.value} "
                    f"({event.reason.value if event.reason else 'unknown'})",
                )

            elif mode == CaptureMode.PREVIEWING:
                self._clear_current()
                if event.kind == EventKind.ERRORED:
                    self.logger.error(f"Preview error: {event.detail}")
                    self.state_machine.transition_to(CaptureMode.IDLE, "preview process failed")
                    notification = (CaptureEvent.PREVIEW_ERROR, {"error": event.detail})
                else:
                    self.logger.warning("Preview process ended on its own")
                    self.state_machine.transition_to(CaptureMode.IDLE, "preview process ended")
                    notification = (CaptureEvent.PREVIEW_STOPPED, {})

        if notification:
            self._publish(*notification)

    # =========================================================================
    # RECORDING
    # =========================================================================

    def start_capture(self, notes: str = "") -> Dict[str, Any]:
        """
        Start a recording session.

        Stops an active preview first: the recording process writes its
        own preview still, and the device is never opened twice.

        Args:
            notes: Free-text notes stored with the session

        Returns:
            {"session_id": str, "start_time": datetime}

        Raises:
            ConflictError: If already capturing
            DeviceUnavailableError: If the device failed its access probe
            SubprocessError: If the transcoder could not be spawned
            StorageError: If the session could not be persisted
        """
        with self._command_lock:
            with self._state_lock:
                mode = self.state_machine.current_state
                if mode in (CaptureMode.RECORDING, CaptureMode.RECORDING_STOPPING):
                    raise ConflictError("Already capturing")

            if mode == CaptureMode.PREVIEWING:
                self.logger.info("Stopping live preview before capture...")
                self._stop_preview_locked()

            try:
                self.device_check(self.device_path)
            except DeviceUnavailableError as e:
                self.logger.error(f"Device access check failed: {e}")
                raise

            with self._state_lock:
                if not self.state_machine.is_idle():
                    raise ConflictError(
                        f"Capture device busy ({self.state_machine.current_state.value})",
                    )

                session = Session.create(
                    self.uploads_dir,
                    notes=notes,
                    extension=VIDEO_FILENAME_EXTENSION,
                )
                preview_path = get_recording_preview_path(self.uploads_dir, session.id)
                self.store.insert(session)

                generation = self._next_generation()
                self.state_machine.transition_to(
                    CaptureMode.RECORDING,
                    f"session {session.id}",
                )

                try:
                    handle = self.transcoder.launch_recording_with_preview(
                        self.device_path,
                        self.capture_params,
                        session.filepath,
                        self.preview_params,
                        preview_path,
                        on_event=partial(self._on_recording_event, generation),
                    )
                except SubprocessError as e:
                    self.logger.error(f"Recording launch failed: {e}")
                    self._next_generation()
                    self._persist(session.id, session.mark_error(str(e)))
                    self.state_machine.transition_to(CaptureMode.IDLE, "recording launch failed")
                    raise

                self._handle = handle
                self._session = session
                self._preview_path = preview_path

        self.logger.info(f"Recording started: session {session.id}")
        return {"session_id": session.id, "start_time": session.start_time}

    def stop_capture(self) -> Dict[str, Any]:
        """
        Stop the active recording and finalize its session.

        Only this path finalizes a session whose stop was requested; exit
        events arriving while stopping are ignored.

        Returns:
            {"success": True, "session_id": str, "duration": float}

        Raises:
            NotCapturingError: If no recording is active
        """
        with self._command_lock:
            with self._state_lock:
                handle, session = self._handle, self._session
                if not self.state_machine.is_capturing() or handle is None or session is None:
                    raise NotCapturingError("Not capturing")

                self.logger.info("Stopping capture...")
                self.state_machine.transition_to(CaptureMode.RECORDING_STOPPING, "stop requested")
                self.transcoder.terminate(handle)

            exited = self._await_exit(handle, self.recording_stop_timeout, "recording")

            with self._state_lock:
                self._clear_current()
                self._persist(session.id, session.mark_completed())
                self.state_machine.transition_to(
                    CaptureMode.IDLE,
                    "recording stopped" if exited else "recording stop timed out",
                )

            self.logger.info(
                f"Capture stopped: session {session.id} ({session.duration:.1f}s)",
            )
            self.upload_queue.submit(
                PendingUpload(session.id, session.filepath, session.end_time),
            )

        return {"success": True, "session_id": session.id, "duration": session.duration}

    def _on_recording_event(self, generation: int, event: ProcessEvent):
        notification: Optional[Notification] = None
        pending: Optional[PendingUpload] = None

        with self._state_lock:
            if generation != self._generation:
                self.logger.debug(f"Ignoring stale recording event: {event.kind.value}")
                return

            mode = self.state_machine.current_state
            session = self._session

            if event.kind == EventKind.STARTED:
                if mode == CaptureMode.RECORDING and session is not None:
                    self.logger.info(f"FFmpeg started for session {session.id}")
                    notification = (
                        CaptureEvent.CAPTURE_STARTED,
                        {"session_id": session.id, "start_time": session.start_time},
                    )

            elif mode == CaptureMode.RECORDING_STOPPING:
                # stop_capture() finalizes this session
                self.logger.debug(
                    f"FFmpeg stopped normally by user: {event.kind.value} "
                    f"({event.reason.value if event.reason else 'unknown'})",
                )

            elif mode == CaptureMode.RECORDING and session is not None:
                self._clear_current()

                if event.kind == EventKind.ERRORED:
                    self.logger.error(f"FFmpeg error (session {session.id}): {event.detail}")
                    self._persist(session.id, session.mark_error(event.detail))
                    self.state_machine.transition_to(CaptureMode.IDLE, "recording process failed")
                    notification = (
                        CaptureEvent.CAPTURE_ERROR,
                        {"session_id": session.id, "error": event.detail},
                    )
                else:
                    # Device EOF: same as a stop
                    self.logger.info(f"Recording completed: session {session.id}")
                    self._persist(session.id, session.mark_completed())
                    self.state_machine.transition_to(CaptureMode.IDLE, "recording process ended")
                    pending = PendingUpload(session.id, session.filepath, session.end_time)

        if notification:
            self._publish(*notification)
        if pending:
            self.upload_queue.submit(pending)

    # =========================================================================
    # NOTES AND QUERIES
    # =========================================================================

    def update_notes(self, session_id: str, text: str) -> bool:
        """
        Replace the notes of a session (any status).

        Returns:
            True if the session exists, False otherwise (nothing written)
        """
        if self.store.find(session_id) is None:
            self.logger.warning(f"Notes update for unknown session: {session_id}")
            return False

        self.store.update_status(session_id, {"notes": text})

        with self._state_lock:
            if self._session is not None and self._session.id == session_id:
                self._session.notes = text

        self.logger.info(f"Notes updated for session {session_id}")
        return True

    def current_state(self) -> Dict[str, Any]:
        """Snapshot of the capture mode and the active session"""
        with self._state_lock:
            mode = self.state_machine.current_state
            return {
                "mode": mode.value,
                "is_previewing": mode in (CaptureMode.PREVIEWING, CaptureMode.PREVIEW_STOPPING),
                "is_capturing": mode in (CaptureMode.RECORDING, CaptureMode.RECORDING_STOPPING),
                "current_session": self._session.to_dict() if self._session else None,
                "state_duration": self.state_machine.get_state_duration(),
            }

    def get_session(self, session_id: str) -> Optional[Session]:
        return self.store.find(session_id)

    def list_sessions(self) -> List[Session]:
        """All sessions, newest first"""
        return self.store.find_all(newest_first=True)

    def current_preview_path(self) -> Optional[Path]:
        """
        Latest preview still.

        The recording's own still while recording, otherwise the live
        preview still; None when neither file exists.
        """
        with self._state_lock:
            recording_preview = self._preview_path if self._session else None

        for candidate in (recording_preview, get_live_preview_path(self.uploads_dir)):
            if candidate is not None and candidate.exists():
                return candidate
        return None

    # =========================================================================
    # SHUTDOWN
    # =========================================================================

    def shutdown(self, upload_timeout: float = UPLOAD_DRAIN_TIMEOUT) -> bool:
        """
        Stop whatever is running and wait for pending uploads.

        Returns:
            True if every upload finished within upload_timeout
        """
        self.logger.info("Shutting down session coordinator...")

        with self._state_lock:
            mode = self.state_machine.current_state

        if mode == CaptureMode.RECORDING:
            try:
                self.stop_capture()
            except NotCapturingError:
                self.logger.debug("Recording ended before shutdown stop")
        elif mode == CaptureMode.PREVIEWING:
            self.stop_preview()

        drained = self.upload_queue.shutdown(timeout=upload_timeout)
        self.logger.info("Session coordinator shut down")
        return drained

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _await_exit(self, handle: TranscoderHandle, timeout: float, label: str) -> bool:
        """
        Wait for a terminated process.

        Returns:
            True if it exited within timeout
        """
        if handle.wait(timeout):
            return True

        self.logger.warning(f"{label} process did not exit within {timeout}s")

        if self.force_kill:
            self.logger.warning(f"Killing {label} process (PID: {handle.pid})")
            self.transcoder.kill(handle)
            if not handle.wait(KILL_WAIT_TIMEOUT):
                self.logger.error(
                    f"{label} process still running after SIGKILL (PID: {handle.pid})",
                )
        return False

    def _process_upload(self, pending: PendingUpload):
        """
        Upload one artifact, persist the outcome, then notify.

        Every outcome publishes uploadComplete or uploadError, followed by
        captureEnded.
        """
        session_id = pending.session_id
        session: Optional[Session] = None

        try:
            session = self.store.find(session_id)
            if session is None:
                raise StorageError(f"Upload for unknown session: {session_id}")
            result = self.dispatcher.upload(pending.artifact_path, session_id)
        except UploadError as e:
            self._fail_upload(session, session_id, str(e), e.status)
        except Exception as e:
            self.logger.error(f"Upload error for session {session_id}: {e}", exc_info=True)
            self._fail_upload(session, session_id, str(e), UploadStatus.FAILED)
        else:
            self._persist(session_id, session.mark_upload_succeeded(result.location))
            self._publish(
                CaptureEvent.UPLOAD_COMPLETE,
                {"session_id": session_id, "location": result.location},
            )
        finally:
            self._publish(
                CaptureEvent.CAPTURE_ENDED,
                {"session_id": session_id, "end_time": pending.end_time},
            )

    def _fail_upload(
        self,
        session: Optional[Session],
        session_id: str,
        error: str,
        status: UploadStatus,
    ):
        if session is not None:
            self._persist(session_id, session.mark_upload_failed(error))
        self._publish(
            CaptureEvent.UPLOAD_ERROR,
            {"session_id": session_id, "error": error, "status": status.value},
        )

    def _persist(self, session_id: str, fields: Dict[str, Any]) -> bool:
        try:
            return self.store.update_status(session_id, fields)
        except StorageError as e:
            self.logger.error(f"Failed to persist session {session_id}: {e}")
            return False

    def _publish(self, event: CaptureEvent, payload: Dict[str, Any]):
        try:
            self.notifier.publish(event.value, payload)
        except Exception as e:
            self.logger.error(f"Error publishing {event.value}: {e}")

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _clear_current(self):
        """Forget the current process; its later events become stale"""
        self._handle = None
        self._session = None
        self._preview_path = None
        self._next_generation()
