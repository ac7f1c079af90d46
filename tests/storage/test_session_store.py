"""
Session Store Tests

Contract tests run against both SQLiteSessionStore and MemorySessionStore,
plus SQLite-only persistence checks.

To run:
    pytest tests/storage/test_session_store.py -v
"""

import time

import pytest

from storage.constants import SessionStatus, UploadOutcome
from storage.factory import StorageFactory, create_store
from storage.implementations.memory_store import MemorySessionStore
from storage.implementations.sqlite_store import SQLiteSessionStore
from storage.interfaces.session_store_interface import StorageError
from storage.models.session import Session

# =============================================================================
# CONTRACT TESTS (BOTH STORES)
# =============================================================================


@pytest.mark.unit
def test_insert_and_find(any_store, new_session):
    any_store.insert(new_session)

    found = any_store.find(new_session.id)

    assert found.id == new_session.id
    assert found.status == SessionStatus.RECORDING
    assert found.notes == "warmup"
    assert found.filepath == new_session.filepath
    assert found.end_time is None


@pytest.mark.unit
def test_find_unknown_returns_none(any_store):
    assert any_store.find("missing") is None


@pytest.mark.unit
def test_duplicate_insert_rejected(any_store, new_session):
    any_store.insert(new_session)

    with pytest.raises(StorageError):
        any_store.insert(new_session)


@pytest.mark.unit
def test_update_status_completed(any_store, new_session):
    any_store.insert(new_session)

    fields = new_session.mark_completed()
    assert any_store.update_status(new_session.id, fields) is True

    found = any_store.find(new_session.id)
    assert found.status == SessionStatus.COMPLETED
    assert found.end_time == new_session.end_time
    assert found.duration == pytest.approx(new_session.duration)


@pytest.mark.unit
def test_update_unknown_session_returns_false(any_store):
    assert any_store.update_status("missing", {"notes": "x"}) is False


@pytest.mark.unit
def test_update_rejects_unknown_field(any_store, new_session):
    any_store.insert(new_session)

    with pytest.raises(ValueError):
        any_store.update_status(new_session.id, {"id": "other"})


@pytest.mark.unit
def test_upload_outcome_persisted(any_store, new_session):
    any_store.insert(new_session)
    any_store.update_status(new_session.id, new_session.mark_completed())

    any_store.update_status(new_session.id, new_session.mark_upload_failed("timeout"))
    found = any_store.find(new_session.id)
    assert found.uploaded is False
    assert found.upload_status == UploadOutcome.FAILED
    assert found.upload_error == "timeout"

    any_store.update_status(new_session.id, new_session.mark_upload_succeeded("s3://b/k"))
    found = any_store.find(new_session.id)
    assert found.uploaded is True
    assert found.upload_status == UploadOutcome.SUCCEEDED
    assert found.remote_location == "s3://b/k"
    assert found.upload_error is None


@pytest.mark.unit
def test_find_all_sorted_by_creation(any_store, uploads_dir):
    first = Session.create(uploads_dir)
    time.sleep(0.01)
    second = Session.create(uploads_dir)
    any_store.insert(first)
    any_store.insert(second)

    assert [s.id for s in any_store.find_all()] == [second.id, first.id]
    assert [s.id for s in any_store.find_all(newest_first=False)] == [first.id, second.id]


@pytest.mark.unit
def test_find_failed_uploads(any_store, uploads_dir):
    failed = Session.create(uploads_dir)
    succeeded = Session.create(uploads_dir)
    errored = Session.create(uploads_dir)
    for session in (failed, succeeded, errored):
        any_store.insert(session)

    any_store.update_status(failed.id, failed.mark_completed())
    any_store.update_status(failed.id, failed.mark_upload_failed("refused"))
    any_store.update_status(succeeded.id, succeeded.mark_completed())
    any_store.update_status(succeeded.id, succeeded.mark_upload_succeeded("x"))
    any_store.update_status(errored.id, errored.mark_error("No such device"))

    assert [s.id for s in any_store.find_failed_uploads()] == [failed.id]


@pytest.mark.unit
def test_stored_copy_is_isolated(memory_store, new_session):
    memory_store.insert(new_session)

    found = memory_store.find(new_session.id)
    found.notes = "changed"

    assert memory_store.find(new_session.id).notes == "warmup"


# =============================================================================
# SQLITE PERSISTENCE TESTS
# =============================================================================


@pytest.mark.unit_integration
def test_sqlite_survives_reopen(tmp_path, new_session):
    base = tmp_path / "uploads"
    store = SQLiteSessionStore(base)
    store.insert(new_session)
    store.update_status(new_session.id, new_session.mark_error("Input/output error"))
    store.cleanup()

    reopened = SQLiteSessionStore(base)
    found = reopened.find(new_session.id)
    reopened.cleanup()

    assert found.status == SessionStatus.ERROR
    assert found.error == "Input/output error"
    assert found.end_time is not None


@pytest.mark.unit_integration
def test_sqlite_creates_storage_dir(tmp_path):
    base = tmp_path / "nested" / "uploads"

    store = SQLiteSessionStore(base, db_name="test.db")
    store.cleanup()

    assert (base / "test.db").exists()


@pytest.mark.unit
def test_memory_store_write_tracking(memory_store, new_session):
    memory_store.insert(new_session)
    memory_store.update_status(new_session.id, {"notes": "a"})
    memory_store.update_status("missing", {"notes": "b"})

    assert memory_store.get_write_count() == 2
    assert memory_store.get_write_count(new_session.id) == 2
    assert memory_store.count_by_status(SessionStatus.RECORDING) == 1


# =============================================================================
# FACTORY TESTS
# =============================================================================


@pytest.mark.unit
def test_factory_modes(tmp_path):
    memory = StorageFactory.create_store(mode="memory")
    sqlite = StorageFactory.create_store(mode="sqlite", storage_base=tmp_path)

    assert isinstance(memory, MemorySessionStore)
    assert isinstance(sqlite, SQLiteSessionStore)
    assert isinstance(create_store(force_memory=True), MemorySessionStore)
    sqlite.cleanup()


@pytest.mark.unit
def test_factory_rejects_unknown_mode():
    with pytest.raises(ValueError):
        StorageFactory.create_store(mode="redis")
