"""
Storage Module Enums

Type definitions for the session storage module.
Configuration values live in config/settings.py; this module only holds
the Enum types describing a recording session's lifecycle.
"""

from enum import Enum

# =============================================================================
# ENUMS
# =============================================================================


class SessionStatus(Enum):
    """Lifecycle status of one recording attempt"""

    RECORDING = "recording"  # Subprocess is writing the artifact
    COMPLETED = "completed"  # Recording finalized (terminal)
    ERROR = "error"  # Transcoder failed or crashed (terminal)


class UploadOutcome(Enum):
    """Remote transfer outcome of a session's artifact"""

    PENDING = "pending"  # Not transferred yet
    SUCCEEDED = "succeeded"  # Transferred, remote locator recorded
    FAILED = "failed"  # Transfer failed, error message recorded


TERMINAL_STATUSES = (SessionStatus.COMPLETED, SessionStatus.ERROR)
