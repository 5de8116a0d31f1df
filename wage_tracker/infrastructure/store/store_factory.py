"""
Record store factory (config-driven).
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from wage_tracker.infrastructure.store.base import RecordStore
from wage_tracker.infrastructure.store.memory_store import InMemoryRecordStore
from wage_tracker.infrastructure.store.sql_store import SqlRecordStore


def get_record_store(backend: str, session_factory: Optional[async_sessionmaker] = None) -> RecordStore:
    name = (backend or "").lower()
    if name == "memory":
        return InMemoryRecordStore()
    if name == "sql":
        if session_factory is None:
            raise ValueError("SQL record store needs a session factory")
        return SqlRecordStore(session_factory)
    raise ValueError(f"Unsupported store backend: {backend}")
