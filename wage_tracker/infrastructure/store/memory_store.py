"""
In-memory record store.

Same contract as the SQL store, without persistence. Useful for local runs
(STORE_BACKEND=memory) and tests.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Mapping

from wage_tracker.domain.errors import RecordNotFound
from wage_tracker.infrastructure.store.base import (
    ErrorHandler,
    SnapshotHandler,
    SnapshotPublisher,
    StoreDocument,
    SubscriptionHandle,
)

logger = logging.getLogger(__name__)


class InMemoryRecordStore:
    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._publisher = SnapshotPublisher()

    def documents(self, path: str) -> List[StoreDocument]:
        collection = self._collections.get(path, {})
        return [StoreDocument(id=doc_id, fields=dict(fields)) for doc_id, fields in collection.items()]

    def subscriber_count(self, path: str) -> int:
        return self._publisher.count(path)

    async def subscribe(
        self,
        path: str,
        on_snapshot: SnapshotHandler,
        on_error: ErrorHandler,
    ) -> SubscriptionHandle:
        handle = self._publisher.add(path, on_snapshot, on_error)
        await self._publisher.deliver(handle, self.documents(path))
        return handle

    async def unsubscribe(self, handle: SubscriptionHandle) -> None:
        self._publisher.remove(handle)

    async def create(self, path: str, fields: Mapping[str, Any]) -> str:
        record_id = uuid.uuid4().hex[:20]
        self._collections.setdefault(path, {})[record_id] = dict(fields)
        logger.debug("Created %s in %s", record_id, path)
        await self._publisher.publish(path, self.documents(path))
        return record_id

    async def update(self, path: str, record_id: str, fields: Mapping[str, Any]) -> None:
        collection = self._collections.get(path, {})
        if record_id not in collection:
            raise RecordNotFound(record_id)
        collection[record_id] = dict(fields)
        await self._publisher.publish(path, self.documents(path))

    async def delete(self, path: str, record_id: str) -> None:
        collection = self._collections.get(path, {})
        if collection.pop(record_id, None) is None:
            logger.debug("Delete of missing record %s in %s ignored", record_id, path)
            return
        await self._publisher.publish(path, self.documents(path))

    async def emit_error(self, path: str, exc: Exception) -> None:
        """Terminate every subscription on a path with a transport error"""
        await self._publisher.fail(path, exc)
