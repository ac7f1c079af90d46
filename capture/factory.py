"""
Capture Factory

Factory pattern for creating transcoder implementations and a fully
wired session coordinator.
"""

import logging
from typing import Literal, Optional

from capture.controllers.session_coordinator import SessionCoordinator
from capture.implementations.ffmpeg_transcoder import FFmpegTranscoder
from capture.implementations.mock_transcoder import MockTranscoder
from capture.interfaces.transcoder_interface import TranscoderInterface
from storage.factory import create_store
from storage.interfaces.session_store_interface import SessionStoreInterface
from upload.controllers.upload_dispatcher import UploadDispatcher

# Type alias for better type hints
TranscoderMode = Literal["auto", "real", "mock"]


class CaptureFactory:
    """
    Factory for creating transcoder implementations.

    Usage:
        # Auto-detect (uses FFmpeg if installed, mock otherwise)
        transcoder = CaptureFactory.create_transcoder()

        # Force mock mode (useful for testing)
        transcoder = CaptureFactory.create_transcoder(mode="mock")

        # Force real FFmpeg (raises error if not installed)
        transcoder = CaptureFactory.create_transcoder(mode="real")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_transcoder(cls, mode: TranscoderMode = "auto") -> TranscoderInterface:
        """
        Create a transcoder instance.

        Raises:
            RuntimeError: If mode="real" but FFmpeg is not installed
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Transcoder (forced)")
            return MockTranscoder()

        transcoder = FFmpegTranscoder()

        if mode == "real":
            if not transcoder.is_available():
                raise RuntimeError(
                    f"FFmpeg requested but not found: {transcoder.ffmpeg_binary}",
                )
            cls._logger.info("Creating FFmpeg Transcoder (forced)")
            return transcoder

        # mode == "auto" - use FFmpeg when installed, mock otherwise
        if transcoder.is_available():
            cls._logger.info("Creating FFmpeg Transcoder (auto-detected)")
            return transcoder

        cls._logger.warning("FFmpeg not available, using Mock Transcoder")
        return MockTranscoder()

    @classmethod
    def create_coordinator(
        cls,
        notifier,
        mode: TranscoderMode = "real",
        store: Optional[SessionStoreInterface] = None,
        dispatcher: Optional[UploadDispatcher] = None,
    ) -> SessionCoordinator:
        """
        Wire a coordinator from settings.

        Args:
            notifier: Anything with publish(event_name, payload)
            mode: Transcoder mode (see create_transcoder)
            store: Session store (default: from SESSION_STORE_MODE)
            dispatcher: Upload dispatcher (default: from UPLOAD_METHOD)
        """
        return SessionCoordinator(
            transcoder=cls.create_transcoder(mode=mode),
            store=store or create_store(),
            notifier=notifier,
            dispatcher=dispatcher or UploadDispatcher(),
        )


# Convenience function for quick creation
def create_transcoder(force_mock: bool = False) -> TranscoderInterface:
    """
    Quick transcoder creation with simple mock override.

    Example:
        # Normal usage
        transcoder = create_transcoder()

        # Testing
        transcoder = create_transcoder(force_mock=True)
    """
    mode = "mock" if force_mock else "auto"
    return CaptureFactory.create_transcoder(mode=mode)
