"""
Upload Test Configuration and Fixtures

Backends are tested without a network: paramiko's SSHClient and the boto3
S3 client are replaced with unittest.mock objects.
"""

from unittest.mock import MagicMock

import pytest

from upload.implementations.mock_uploader import MockUploader


@pytest.fixture
def artifact(tmp_path):
    """A small finished recording on disk"""
    path = tmp_path / "3f2a.mp4"
    path.write_bytes(b"\x00" * 2048)
    return path


@pytest.fixture
def mock_uploader():
    return MockUploader()


@pytest.fixture
def s3_client():
    """Stand-in for boto3.client('s3')"""
    return MagicMock()


def pytest_configure(config):
    """
    Configure pytest with custom markers for upload tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
