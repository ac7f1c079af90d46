import logging
import threading
from typing import Any, Callable, Dict, List

# Subscribing to this name receives every event
ALL_EVENTS = "*"


class EventBus:
    """
    In-process publish/subscribe channel for capture notifications.

    Delivery is synchronous on the publishing thread and fire-and-forget:
    a failing subscriber is logged and never affects the publisher or the
    other subscribers.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.subscribers: Dict[str, List[Callable]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: str, callback: Callable[[str, Dict[str, Any]], None]):
        """Register callback(event_type, payload) for one event or ALL_EVENTS"""
        with self._lock:
            self.subscribers.setdefault(event_type, []).append(callback)
        self.logger.debug(f"Subscribed to {event_type}: {callback}")

    def unsubscribe(self, event_type: str, callback: Callable) -> bool:
        with self._lock:
            callbacks = self.subscribers.get(event_type, [])
            if callback not in callbacks:
                return False
            callbacks.remove(callback)
            return True

    def publish(self, event_type: str, data: Dict[str, Any] = None):
        payload = data or {}
        with self._lock:
            targets = list(self.subscribers.get(event_type, []))
            targets += self.subscribers.get(ALL_EVENTS, [])

        self.logger.debug(f"Publishing {event_type}: {payload}")

        for callback in targets:
            try:
                callback(event_type, payload)
            except Exception as e:
                self.logger.error(f"Error in subscriber for {event_type}: {e}")
