import logging
import time
from enum import Enum
from typing import Callable, Dict, Optional


class CaptureMode(Enum):
    IDLE = "idle"
    PREVIEWING = "previewing"
    PREVIEW_STOPPING = "preview_stopping"
    RECORDING = "recording"
    RECORDING_STOPPING = "recording_stopping"


# Which modes each mode may move to
ALLOWED_TRANSITIONS = {
    CaptureMode.IDLE: {CaptureMode.PREVIEWING, CaptureMode.RECORDING},
    CaptureMode.PREVIEWING: {CaptureMode.PREVIEW_STOPPING, CaptureMode.IDLE},
    CaptureMode.PREVIEW_STOPPING: {CaptureMode.IDLE},
    CaptureMode.RECORDING: {CaptureMode.RECORDING_STOPPING, CaptureMode.IDLE},
    CaptureMode.RECORDING_STOPPING: {CaptureMode.IDLE},
}

STOPPING_MODES = {CaptureMode.PREVIEW_STOPPING, CaptureMode.RECORDING_STOPPING}


class InvalidTransitionError(Exception):
    """Raised when a transition is not in ALLOWED_TRANSITIONS"""


class StateMachine:
    """
    Capture mode of the single capture device.

    Not thread-safe on its own: the session coordinator only touches it
    while holding its state lock.
    """

    def __init__(self):
        self.current_state = CaptureMode.IDLE
        self.previous_state: Optional[CaptureMode] = None
        self.state_start_time = time.time()
        self.logger = logging.getLogger(__name__)

        # Called with (old_state, new_state, reason) after every transition
        self.on_state_change: Optional[Callable] = None

        self.logger.info("State machine initialized in IDLE state")

    def get_current_state(self) -> CaptureMode:
        """Get the current capture mode"""
        return self.current_state

    def get_state_duration(self) -> float:
        """Get how long we've been in the current state (seconds)"""
        return time.time() - self.state_start_time

    def can_transition_to(self, new_state: CaptureMode) -> bool:
        return new_state in ALLOWED_TRANSITIONS[self.current_state]

    def transition_to(self, new_state: CaptureMode, reason: str = ""):
        """
        Transition to a new state with logging and callback notification

        Raises:
            InvalidTransitionError: If the move is not allowed from here
        """
        if new_state == self.current_state:
            self.logger.debug(f"Already in state {new_state.value}")
            return

        if not self.can_transition_to(new_state):
            raise InvalidTransitionError(
                f"Cannot go from {self.current_state.value} to {new_state.value}",
            )

        old_state = self.current_state
        self.previous_state = old_state
        self.current_state = new_state
        self.state_start_time = time.time()

        log_msg = f"State transition: {old_state.value} -> {new_state.value}"
        if reason:
            log_msg += f" ({reason})"
        self.logger.info(log_msg)

        if self.on_state_change:
            try:
                self.on_state_change(old_state, new_state, reason)
            except Exception as e:
                self.logger.error(f"Error in state change callback: {e}")

    def is_idle(self) -> bool:
        return self.current_state == CaptureMode.IDLE

    def is_previewing(self) -> bool:
        return self.current_state == CaptureMode.PREVIEWING

    def is_capturing(self) -> bool:
        return self.current_state == CaptureMode.RECORDING

    def is_stopping(self) -> bool:
        return self.current_state in STOPPING_MODES

    def get_status_info(self) -> Dict:
        """Get detailed status information for debugging/monitoring"""
        return {
            "current_state": self.current_state.value,
            "previous_state": (
                self.previous_state.value if self.previous_state else None
            ),
            "state_duration": self.get_state_duration(),
        }
