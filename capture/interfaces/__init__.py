"""
Interfaces Package

Transcoder supervisor contract.
"""

from capture.interfaces.transcoder_interface import (
    CaptureParams,
    EventCallback,
    PreviewParams,
    ProcessEvent,
    TranscoderHandle,
    TranscoderInterface,
)

__all__ = [
    "CaptureParams",
    "EventCallback",
    "PreviewParams",
    "ProcessEvent",
    "TranscoderHandle",
    "TranscoderInterface",
]
