"""
Upload Factory

Factory pattern for creating uploader implementations.
Follows same pattern as capture/factory.py and storage/factory.py.

The backend is selected by UPLOAD_METHOD in config/settings.py.
"""

import logging
from typing import Optional

from config.settings import UPLOAD_METHOD
from upload.constants import UploadMethod
from upload.implementations.local_uploader import LocalUploader
from upload.implementations.mock_uploader import MockUploader
from upload.implementations.s3_uploader import S3Uploader
from upload.implementations.sftp_uploader import SFTPUploader
from upload.interfaces.uploader_interface import UploaderInterface


class UploaderFactory:
    """
    Factory for creating uploader implementations.

    Usage:
        # Backend from environment (UPLOAD_METHOD)
        uploader = UploaderFactory.create_uploader()

        # Force mock for testing
        uploader = UploaderFactory.create_uploader(method="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_uploader(cls, method: Optional[str] = None) -> UploaderInterface:
        """
        Create an uploader instance.

        Args:
            method: "sftp", "s3", "local" or "mock" (default: UPLOAD_METHOD)

        Returns:
            UploaderInterface implementation

        Raises:
            ValueError: If the method is unknown
        """
        selected = (method or UPLOAD_METHOD).strip().lower()

        try:
            upload_method = UploadMethod(selected)
        except ValueError:
            valid = ", ".join(m.value for m in UploadMethod)
            raise ValueError(
                f"Unknown upload method: {selected!r} (expected one of: {valid})",
            ) from None

        if upload_method == UploadMethod.SFTP:
            uploader: UploaderInterface = SFTPUploader()
        elif upload_method == UploadMethod.S3:
            uploader = S3Uploader()
        elif upload_method == UploadMethod.MOCK:
            uploader = MockUploader()
        else:
            uploader = LocalUploader()

        cls._logger.info(f"Creating {type(uploader).__name__} ({upload_method.value})")

        if not uploader.is_available():
            cls._logger.warning(
                f"Uploader '{upload_method.value}' is not fully configured. "
                f"Uploads will fail until settings are provided.",
            )

        return uploader


# Convenience function for quick creation
def create_uploader(force_mock: bool = False) -> UploaderInterface:
    """
    Quick uploader creation with simple mock override.

    Example:
        # Normal usage
        uploader = create_uploader()

        # Testing
        uploader = create_uploader(force_mock=True)
    """
    method = UploadMethod.MOCK.value if force_mock else None
    return UploaderFactory.create_uploader(method=method)
