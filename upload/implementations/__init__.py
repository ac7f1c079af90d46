"""
Implementations Package

Concrete upload backends.
"""

from upload.implementations.local_uploader import LocalUploader
from upload.implementations.mock_uploader import MockUploader
from upload.implementations.s3_uploader import S3Uploader
from upload.implementations.sftp_uploader import SFTPUploader

__all__ = [
    "LocalUploader",
    "MockUploader",
    "S3Uploader",
    "SFTPUploader",
]
