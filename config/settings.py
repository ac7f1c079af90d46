"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Secrets (SFTP password, AWS keys) should be in .env, NOT here
- Import these settings in modules: from config.settings import VIDEO_CAPTURE_DEVICE
- Every value can be overridden with an environment variable of the same name
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# CAPTURE DEVICE CONFIGURATION
# =============================================================================

VIDEO_CAPTURE_DEVICE = os.getenv("VIDEO_CAPTURE_DEVICE", "/dev/video0")
VIDEO_INPUT_FORMAT = "v4l2"  # Video4Linux2

# Full-quality capture settings (archival stream)
VIDEO_RESOLUTION = os.getenv("VIDEO_RESOLUTION", "1920x1080")
VIDEO_FRAMERATE = int(os.getenv("VIDEO_FRAMERATE", "30"))
VIDEO_BITRATE = os.getenv("VIDEO_BITRATE", "5000k")
VIDEO_CODEC = "libx264"
VIDEO_PRESET = "ultrafast"  # FFmpeg encoding preset
VIDEO_CRF = 23  # Constant Rate Factor (quality)
VIDEO_FILENAME_EXTENSION = ".mp4"

# Low-rate preview settings (continuously overwritten still image)
PREVIEW_RESOLUTION = os.getenv("PREVIEW_RESOLUTION", "640x360")
PREVIEW_FRAMERATE = int(os.getenv("PREVIEW_FRAMERATE", "15"))
PREVIEW_QUALITY = 5  # JPEG qscale, 2 (best) .. 31 (worst)
PREVIEW_FILENAME = "preview.jpg"
LIVE_PREVIEW_DIRNAME = "live_preview"
RECORDING_PREVIEW_SUFFIX = "_preview"

# =============================================================================
# DEVICE ACCESS GUARD
# =============================================================================

DEVICE_CHECK_ATTEMPTS = int(os.getenv("DEVICE_CHECK_ATTEMPTS", "3"))
DEVICE_CHECK_BACKOFF = 0.5  # seconds between probe attempts

# =============================================================================
# TRANSCODER PROCESS SUPERVISION
# =============================================================================

FFMPEG_BINARY = os.getenv("FFMPEG_BINARY", "ffmpeg")
FFMPEG_LOG_LEVEL = "error"

# Bounded waits for graceful termination (seconds)
PREVIEW_STOP_TIMEOUT = 1.0
RECORDING_STOP_TIMEOUT = 2.0

# Escalate to SIGKILL when a stop times out
FORCE_KILL_ON_STOP_TIMEOUT = _env_bool("FORCE_KILL_ON_STOP_TIMEOUT", True)

# Lines of subprocess stderr kept for error reports
STDERR_TAIL_LINES = 40

# =============================================================================
# STORAGE CONFIGURATION
# =============================================================================

UPLOADS_DIR = Path(os.getenv("UPLOADS_DIR", "./uploads"))
SESSION_DB_NAME = os.getenv("SESSION_DB_NAME", "sessions.db")
SESSION_STORE_MODE = os.getenv("SESSION_STORE_MODE", "sqlite")  # sqlite | memory

# =============================================================================
# UPLOAD CONFIGURATION
# =============================================================================

# Exactly one backend: sftp, s3 or local (no transfer)
UPLOAD_METHOD = os.getenv("UPLOAD_METHOD", "sftp").strip().lower()

# Run uploads on a background worker (capture may restart meanwhile)
BACKGROUND_UPLOADS = _env_bool("BACKGROUND_UPLOADS", True)

# Seconds to wait for in-flight uploads during shutdown
UPLOAD_DRAIN_TIMEOUT = 30.0

# SFTP target
SFTP_HOST = os.getenv("SFTP_HOST", "localhost")
SFTP_PORT = int(os.getenv("SFTP_PORT", "22"))
SFTP_USERNAME = os.getenv("SFTP_USERNAME", "")
SFTP_PASSWORD = os.getenv("SFTP_PASSWORD", "")
SFTP_PRIVATE_KEY_PATH = os.getenv("SFTP_PRIVATE_KEY_PATH", "").strip()
SFTP_UPLOAD_DIR = os.getenv("SFTP_UPLOAD_DIR", "/srv/videos")
SFTP_CONNECT_TIMEOUT = 15.0  # seconds
SFTP_STRICT_HOST_KEYS = _env_bool("SFTP_STRICT_HOST_KEYS", False)

# S3 target
AWS_S3_BUCKET = os.getenv("AWS_S3_BUCKET", "")
AWS_S3_FOLDER = os.getenv("AWS_S3_FOLDER", "videos")
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID")
AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY")
S3_CONTENT_TYPE = "video/mp4"

# =============================================================================
# SERVICE CONFIGURATION
# =============================================================================

# Remote Control Configuration
# File-based control for triggering actions via SSH/scripts
# Commands: PREVIEW, STOP_PREVIEW, START [notes], STOP, NOTES <id> <text>, STATUS
CONTROL_FILE = os.getenv(
    "CONTROL_FILE",
    "/tmp/capture_control.cmd",  # noqa: S108
)
CONTROL_POLL_INTERVAL = 0.1  # seconds

# JSON snapshot of the capture state, rewritten on every notification
STATE_FILE = os.getenv(
    "STATE_FILE",
    "/tmp/capture_state.json",  # noqa: S108
)

# Logging Configuration
LOG_DIR = os.getenv("LOG_DIR", "/var/log/capture")
LOG_SERVICE_FILE = "service.log"
LOG_BACKUP_DAYS = 7
