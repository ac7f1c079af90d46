"""
Upload Dispatcher and Factory Tests

Tests cover:
1. Dispatcher reports results and re-raises failures
2. Local-only and mock backends
3. Factory creates the configured implementation

To run:
    pytest tests/upload/test_upload_dispatcher.py -v
"""

import pytest

from upload.constants import UploadMethod, UploadStatus
from upload.controllers.upload_dispatcher import UploadDispatcher
from upload.factory import UploaderFactory, create_uploader
from upload.implementations.local_uploader import LocalUploader
from upload.implementations.mock_uploader import MockUploader
from upload.implementations.s3_uploader import S3Uploader
from upload.implementations.sftp_uploader import SFTPUploader
from upload.interfaces.uploader_interface import UploadError, validate_artifact

# =============================================================================
# DISPATCHER TESTS
# =============================================================================


@pytest.mark.unit
def test_dispatcher_returns_location(mock_uploader, artifact):
    dispatcher = UploadDispatcher(uploader=mock_uploader)

    result = dispatcher.upload(str(artifact), "3f2a")

    assert result.success is True
    assert result.location == "mock://uploads/3f2a/3f2a.mp4"
    assert mock_uploader.get_last_upload()["session_id"] == "3f2a"
    assert dispatcher.method == "mock"


@pytest.mark.unit
def test_dispatcher_reraises_failure(artifact):
    dispatcher = UploadDispatcher(
        uploader=MockUploader(should_fail=True, error_status=UploadStatus.AUTH_ERROR),
    )

    with pytest.raises(UploadError) as exc_info:
        dispatcher.upload(artifact, "3f2a")

    assert exc_info.value.status == UploadStatus.AUTH_ERROR


@pytest.mark.unit
def test_local_uploader_keeps_artifact_in_place(artifact):
    result = UploadDispatcher(uploader=LocalUploader()).upload(artifact, "3f2a")

    assert result.location == str(artifact)
    assert result.method == UploadMethod.LOCAL.value
    assert artifact.exists()


@pytest.mark.unit
def test_validate_artifact(artifact, tmp_path):
    assert validate_artifact(artifact) == 2048

    with pytest.raises(UploadError) as exc_info:
        validate_artifact(tmp_path / "missing.mp4")
    assert exc_info.value.status == UploadStatus.INVALID_FILE


# =============================================================================
# FACTORY TESTS
# =============================================================================


@pytest.mark.unit
@pytest.mark.parametrize(
    "method, expected",
    [
        ("local", LocalUploader),
        ("mock", MockUploader),
        ("SFTP", SFTPUploader),
        ("s3", S3Uploader),
    ],
)
def test_factory_creates_backend(method, expected):
    assert isinstance(UploaderFactory.create_uploader(method=method), expected)


@pytest.mark.unit
def test_factory_rejects_unknown_method():
    with pytest.raises(ValueError):
        UploaderFactory.create_uploader(method="youtube")


@pytest.mark.unit
def test_convenience_function_force_mock():
    assert isinstance(create_uploader(force_mock=True), MockUploader)
