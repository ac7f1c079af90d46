"""
Event Bus Tests

To run:
    pytest tests/core/test_event_bus.py -v
"""

import pytest

from core.event_bus import ALL_EVENTS, EventBus


@pytest.mark.unit
def test_publish_reaches_subscriber():
    bus = EventBus()
    received = []
    bus.subscribe("captureStarted", lambda event, payload: received.append((event, payload)))

    bus.publish("captureStarted", {"session_id": "abc"})
    bus.publish("captureEnded", {"session_id": "abc"})

    assert received == [("captureStarted", {"session_id": "abc"})]


@pytest.mark.unit
def test_wildcard_subscriber_receives_everything():
    bus = EventBus()
    received = []
    bus.subscribe(ALL_EVENTS, lambda event, payload: received.append(event))

    bus.publish("previewStarted")
    bus.publish("uploadError", {"error": "x"})

    assert received == ["previewStarted", "uploadError"]


@pytest.mark.unit
def test_missing_payload_becomes_empty_dict():
    bus = EventBus()
    received = []
    bus.subscribe("previewStopped", lambda event, payload: received.append(payload))

    bus.publish("previewStopped")

    assert received == [{}]


@pytest.mark.unit
def test_failing_subscriber_is_isolated():
    bus = EventBus()
    received = []

    def broken(event, payload):
        raise RuntimeError("subscriber bug")

    bus.subscribe("captureError", broken)
    bus.subscribe("captureError", lambda event, payload: received.append(payload))

    bus.publish("captureError", {"error": "No such device"})

    assert received == [{"error": "No such device"}]


@pytest.mark.unit
def test_unsubscribe():
    bus = EventBus()
    received = []

    def callback(event, payload):
        received.append(event)

    bus.subscribe("captureEnded", callback)
    assert bus.unsubscribe("captureEnded", callback) is True
    assert bus.unsubscribe("captureEnded", callback) is False

    bus.publish("captureEnded")

    assert received == []
