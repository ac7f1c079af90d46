"""
Storage Test Configuration and Fixtures

This file contains pytest fixtures shared across storage tests.
Both session stores are exercised through the same fixtures so the
in-memory store keeps matching the SQLite one.

To use pytest:
    pip install pytest
    pytest tests/storage/
"""

import pytest

from storage.implementations.memory_store import MemorySessionStore
from storage.implementations.sqlite_store import SQLiteSessionStore
from storage.models.session import Session

# =============================================================================
# STORE FIXTURES
# =============================================================================


@pytest.fixture
def sqlite_store(tmp_path):
    """
    Provide a SQLiteSessionStore backed by a temporary database.

    Usage:
        def test_something(sqlite_store):
            sqlite_store.insert(session)
    """
    store = SQLiteSessionStore(tmp_path / "uploads")
    yield store
    store.cleanup()


@pytest.fixture
def memory_store():
    store = MemorySessionStore()
    yield store
    store.cleanup()


@pytest.fixture(params=["sqlite", "memory"])
def any_store(request, tmp_path):
    """Run a test once against each store implementation"""
    if request.param == "sqlite":
        store = SQLiteSessionStore(tmp_path / "uploads")
    else:
        store = MemorySessionStore()
    yield store
    store.cleanup()


# =============================================================================
# SESSION FIXTURES
# =============================================================================


@pytest.fixture
def uploads_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def new_session(uploads_dir):
    """A fresh session in status recording"""
    return Session.create(uploads_dir, notes="warmup")


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """
    Configure pytest with custom markers for storage tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "unit_integration: Integration tests")
