"""
Core utilities and modules.

Public API:
    - CaptureMode: Capture device modes
    - StateMachine: Capture mode state machine
    - EventBus: Publish/subscribe notification channel

Usage:
    from core import EventBus

    bus = EventBus()
    bus.subscribe("captureStarted", lambda name, payload: print(payload))
"""

from core.event_bus import ALL_EVENTS, EventBus
from core.state_machine import CaptureMode, InvalidTransitionError, StateMachine

__all__ = [
    "ALL_EVENTS",
    "CaptureMode",
    "EventBus",
    "InvalidTransitionError",
    "StateMachine",
]
