"""
Interfaces Package

Abstract interfaces for upload implementations.
"""

from upload.interfaces.uploader_interface import (
    UploadError,
    UploaderInterface,
    UploadResult,
)

__all__ = [
    "UploaderInterface",
    "UploadResult",
    "UploadError",
]
