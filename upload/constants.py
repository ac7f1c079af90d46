"""
Upload Constants

Centralized constants for the upload module.
Connection settings and credentials live in config/settings.py.
"""

from enum import Enum

# =============================================================================
# UPLOAD METHODS
# =============================================================================


class UploadMethod(Enum):
    """Remote backend selected by UPLOAD_METHOD"""

    SFTP = "sftp"
    S3 = "s3"
    LOCAL = "local"  # No transfer, artifact stays on disk
    MOCK = "mock"  # Simulated backend for tests


# =============================================================================
# UPLOAD STATUS
# =============================================================================


class UploadStatus(Enum):
    """Upload operation status codes"""

    SUCCESS = "success"
    FAILED = "failed"
    AUTH_ERROR = "auth_error"
    NETWORK_ERROR = "network_error"
    INVALID_FILE = "invalid_file"
    CONFIG_ERROR = "config_error"


# =============================================================================
# REMOTE LAYOUT
# =============================================================================

# Artifacts land under <base>/<session id>/<filename> on every backend
REMOTE_PATH_TEMPLATE = "{base}/{session_id}/{filename}"

# Public S3 object URL (virtual-hosted style)
S3_LOCATION_TEMPLATE = "https://{bucket}.s3.{region}.amazonaws.com/{key}"
