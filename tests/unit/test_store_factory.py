from datetime import datetime, timezone

import pytest

from wage_tracker.infrastructure.store.memory_store import InMemoryRecordStore
from wage_tracker.infrastructure.store.sql_store import SqlRecordStore
from wage_tracker.infrastructure.store.store_factory import get_record_store
from wage_tracker.utils.time import parse_iso_datetime


def test_memory_backend():
    assert isinstance(get_record_store("memory"), InMemoryRecordStore)


def test_sql_backend(session_factory):
    assert isinstance(get_record_store("SQL", session_factory), SqlRecordStore)


def test_sql_backend_needs_session_factory():
    with pytest.raises(ValueError):
        get_record_store("sql")


def test_unknown_backend():
    with pytest.raises(ValueError, match="Unsupported store backend"):
        get_record_store("firestore")


def test_parse_iso_datetime_assumes_utc():
    assert parse_iso_datetime("2024-01-02T08:30:00") == datetime(2024, 1, 2, 8, 30, tzinfo=timezone.utc)
    assert parse_iso_datetime("2024-01-02T08:30:00Z") == datetime(2024, 1, 2, 8, 30, tzinfo=timezone.utc)
