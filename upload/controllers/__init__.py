"""
Controllers Package

High-level upload coordinators.
"""

from upload.controllers.upload_dispatcher import UploadDispatcher

__all__ = [
    "UploadDispatcher",
]
