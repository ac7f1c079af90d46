"""
State Machine Tests

Tests for the capture mode state machine showing:
- Allowed and rejected transitions
- Stopping modes
- Change callback

To run:
    pytest tests/core/test_state_machine.py -v
"""

import pytest

from core.state_machine import CaptureMode, InvalidTransitionError, StateMachine


@pytest.fixture
def state_machine():
    return StateMachine()


@pytest.mark.unit
def test_starts_idle(state_machine):
    assert state_machine.is_idle()
    assert state_machine.previous_state is None


@pytest.mark.unit
def test_preview_cycle(state_machine):
    state_machine.transition_to(CaptureMode.PREVIEWING, "preview requested")
    assert state_machine.is_previewing()

    state_machine.transition_to(CaptureMode.PREVIEW_STOPPING)
    assert state_machine.is_stopping()

    state_machine.transition_to(CaptureMode.IDLE)
    assert state_machine.is_idle()
    assert state_machine.previous_state == CaptureMode.PREVIEW_STOPPING


@pytest.mark.unit
def test_recording_may_fail_straight_to_idle(state_machine):
    state_machine.transition_to(CaptureMode.RECORDING)
    assert state_machine.is_capturing()

    state_machine.transition_to(CaptureMode.IDLE, "recording process failed")
    assert state_machine.is_idle()


@pytest.mark.unit
@pytest.mark.parametrize(
    "path",
    [
        [CaptureMode.PREVIEWING, CaptureMode.RECORDING],
        [CaptureMode.RECORDING, CaptureMode.PREVIEWING],
        [CaptureMode.PREVIEW_STOPPING],
        [CaptureMode.RECORDING, CaptureMode.RECORDING_STOPPING, CaptureMode.RECORDING],
    ],
)
def test_rejected_transitions(state_machine, path):
    *allowed, rejected = path
    for mode in allowed:
        state_machine.transition_to(mode)

    with pytest.raises(InvalidTransitionError):
        state_machine.transition_to(rejected)


@pytest.mark.unit
def test_same_state_is_noop(state_machine):
    calls = []
    state_machine.on_state_change = lambda old, new, reason: calls.append((old, new))

    state_machine.transition_to(CaptureMode.IDLE)

    assert calls == []


@pytest.mark.unit
def test_callback_receives_transition(state_machine):
    calls = []
    state_machine.on_state_change = lambda old, new, reason: calls.append((old, new, reason))

    state_machine.transition_to(CaptureMode.RECORDING, "session abc")

    assert calls == [(CaptureMode.IDLE, CaptureMode.RECORDING, "session abc")]


@pytest.mark.unit
def test_callback_error_does_not_block_transition(state_machine):
    def broken(old, new, reason):
        raise RuntimeError("callback bug")

    state_machine.on_state_change = broken
    state_machine.transition_to(CaptureMode.PREVIEWING)

    assert state_machine.is_previewing()


@pytest.mark.unit
def test_status_info(state_machine):
    state_machine.transition_to(CaptureMode.RECORDING)

    info = state_machine.get_status_info()

    assert info["current_state"] == "recording"
    assert info["previous_state"] == "idle"
    assert info["state_duration"] >= 0
