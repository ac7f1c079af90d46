"""
FFmpeg Command and Exit Classification Tests

Tests for the command builders and the exit classification showing:
- Single device read for recording (split filter, two outputs)
- Preview still overwritten in place
- Signal exits vs. errors

To run:
    pytest tests/capture/test_ffmpeg_commands.py -v
"""

import pytest

from capture.constants import (
    EventKind,
    ExitReason,
    classify_exit,
    get_preview_command,
    get_recording_command,
)
from capture.implementations.ffmpeg_transcoder import FFmpegTranscoder
from capture.interfaces.transcoder_interface import CaptureParams, PreviewParams, ProcessEvent

# =============================================================================
# COMMAND BUILDER TESTS
# =============================================================================


@pytest.mark.unit
def test_preview_command():
    cmd = get_preview_command(
        "/dev/video0",
        "/uploads/live_preview/preview.jpg",
        "1920x1080",
        30,
        640,
        360,
        preview_framerate=15,
        preview_quality=5,
        ffmpeg_binary="ffmpeg",
    )

    assert cmd[0] == "ffmpeg"
    assert cmd.count("-i") == 1
    assert cmd[cmd.index("-i") + 1] == "/dev/video0"
    assert cmd[cmd.index("-f") + 1] == "v4l2"
    assert cmd[cmd.index("-video_size") + 1] == "1920x1080"
    assert cmd[cmd.index("-vf") + 1] == "scale=640:360"
    assert cmd[cmd.index("-update") + 1] == "1"
    assert cmd[cmd.index("-r") + 1] == "15"
    assert "-nostdin" in cmd
    assert cmd[-1] == "/uploads/live_preview/preview.jpg"


@pytest.mark.unit
def test_preview_command_without_rate_limit():
    cmd = get_preview_command("/dev/video0", "p.jpg", "1280x720", 30, 320, 180)

    assert "-r" not in cmd


@pytest.mark.unit
def test_recording_command_reads_device_once():
    cmd = get_recording_command(
        "/dev/video0",
        "/uploads/abc.mp4",
        "/uploads/abc_preview/preview.jpg",
        "1920x1080",
        30,
        640,
        360,
        bitrate="5000k",
    )

    assert cmd.count("-i") == 1
    assert cmd[cmd.index("-filter_complex") + 1] == (
        "split=2[rec][prev];[prev]scale=640:360[scaled]"
    )

    archive_index = cmd.index("/uploads/abc.mp4")
    preview_index = cmd.index("/uploads/abc_preview/preview.jpg")
    assert archive_index < preview_index
    assert preview_index == len(cmd) - 1

    archive_args = cmd[cmd.index("[rec]"):archive_index]
    assert "libx264" in archive_args
    assert archive_args[archive_args.index("-maxrate") + 1] == "5000k"
    assert "+frag_keyframe+empty_moov" in archive_args

    preview_args = cmd[cmd.index("[scaled]"):preview_index]
    assert "-update" in preview_args


@pytest.mark.unit
def test_recording_command_low_latency_input():
    cmd = get_recording_command("/dev/video0", "a.mp4", "p.jpg", "1280x720", 30, 320, 180)

    input_args = cmd[:cmd.index("-i")]
    assert "-use_wallclock_as_timestamps" in input_args
    assert "nobuffer" in input_args


@pytest.mark.unit
def test_transcoder_availability_with_missing_binary():
    transcoder = FFmpegTranscoder(ffmpeg_binary="/nonexistent/ffmpeg")

    assert transcoder.is_available() is False


@pytest.mark.unit
def test_capture_params_reject_bad_resolution():
    with pytest.raises(ValueError):
        CaptureParams(resolution="wide")

    assert PreviewParams(resolution="640x360").size == (640, 360)


# =============================================================================
# EXIT CLASSIFICATION TESTS
# =============================================================================


@pytest.mark.unit
@pytest.mark.parametrize(
    "returncode, stderr_text, requested, expected",
    [
        (0, "", False, ExitReason.NORMAL),
        (-15, "", True, ExitReason.SIGNALED),
        (-9, "", False, ExitReason.SIGNALED),
        (255, "Exiting normally, received signal 15.", True, ExitReason.SIGNALED),
        (255, "Exiting normally, received signal 15.", False, ExitReason.ERROR),
        (1, "Exiting normally, received signal 2.", True, ExitReason.SIGNALED),
        (255, "", True, ExitReason.SIGNALED),
        (255, "", False, ExitReason.ERROR),
        (1, "No such device", False, ExitReason.ERROR),
    ],
)
def test_classify_exit(returncode, stderr_text, requested, expected):
    assert classify_exit(returncode, stderr_text, requested) == expected


@pytest.mark.unit
def test_requested_signal_exit_is_ended():
    event = ProcessEvent.from_exit(-15, terminate_requested=True)

    assert event.kind == EventKind.ENDED
    assert event.detail == ""


@pytest.mark.unit
def test_unrequested_signal_exit_is_errored():
    event = ProcessEvent.from_exit(-9)

    assert event.kind == EventKind.ERRORED
    assert event.reason == ExitReason.SIGNALED


@pytest.mark.unit
def test_error_detail_includes_stderr():
    event = ProcessEvent.from_exit(1, "Input/output error")

    assert event.kind == EventKind.ERRORED
    assert event.detail == (
        "Transcoder exited with code 1\n\nFFmpeg stderr:\nInput/output error"
    )
    assert event.returncode == 1
