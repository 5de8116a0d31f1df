"""
SQL-backed record store.

Documents live in the daily_records table. After every committed mutation
the full collection is re-read and pushed to that path's subscribers.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from wage_tracker.domain.errors import RecordNotFound, StoreUnavailable
from wage_tracker.infrastructure.db.repositories.daily_record_repository import DailyRecordRepository
from wage_tracker.infrastructure.store.base import (
    ErrorHandler,
    SnapshotHandler,
    SnapshotPublisher,
    StoreDocument,
    SubscriptionHandle,
)

logger = logging.getLogger(__name__)


class SqlRecordStore:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory
        self._publisher = SnapshotPublisher()

    def subscriber_count(self, path: str) -> int:
        return self._publisher.count(path)

    async def _load(self, path: str) -> List[StoreDocument]:
        async with self._session_factory() as session:
            repo = DailyRecordRepository(session)
            rows = await repo.list_for_path(path)
            return [StoreDocument(id=row.id, fields=row.to_fields()) for row in rows]

    async def _refresh(self, path: str) -> None:
        if not self._publisher.count(path):
            return
        try:
            documents = await self._load(path)
        except SQLAlchemyError as exc:
            logger.warning("Snapshot reload failed for %s: %s", path, exc)
            await self._publisher.fail(path, StoreUnavailable(f"Snapshot reload failed: {exc}"))
            return
        await self._publisher.publish(path, documents)

    async def subscribe(
        self,
        path: str,
        on_snapshot: SnapshotHandler,
        on_error: ErrorHandler,
    ) -> SubscriptionHandle:
        handle = self._publisher.add(path, on_snapshot, on_error)
        try:
            documents = await self._load(path)
        except SQLAlchemyError as exc:
            self._publisher.remove(handle)
            raise StoreUnavailable(f"Subscribe failed for {path}: {exc}") from exc
        await self._publisher.deliver(handle, documents)
        return handle

    async def unsubscribe(self, handle: SubscriptionHandle) -> None:
        self._publisher.remove(handle)

    async def create(self, path: str, fields: Mapping[str, Any]) -> str:
        try:
            async with self._session_factory() as session:
                repo = DailyRecordRepository(session)
                record_id = await repo.create(path, fields)
                await session.commit()
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"Create failed: {exc}") from exc
        await self._refresh(path)
        return record_id

    async def update(self, path: str, record_id: str, fields: Mapping[str, Any]) -> None:
        try:
            async with self._session_factory() as session:
                repo = DailyRecordRepository(session)
                updated = await repo.overwrite(path, record_id, fields)
                if updated is None:
                    raise RecordNotFound(record_id)
                await session.commit()
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"Update failed: {exc}") from exc
        await self._refresh(path)

    async def delete(self, path: str, record_id: str) -> None:
        try:
            async with self._session_factory() as session:
                repo = DailyRecordRepository(session)
                deleted = await repo.delete(path, record_id)
                await session.commit()
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"Delete failed: {exc}") from exc
        if not deleted:
            logger.debug("Delete of missing record %s in %s ignored", record_id, path)
            return
        await self._refresh(path)
