"""
Remote store interface.

A store holds one collection of record documents per identity and pushes
the full current collection (never a diff) to every subscriber after each
change.
"""

from __future__ import annotations

import inspect
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Protocol, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreDocument:
    id: str
    fields: Mapping[str, Any]


@dataclass(frozen=True)
class SubscriptionHandle:
    path: str
    handle_id: str = field(default_factory=lambda: uuid.uuid4().hex)


SnapshotHandler = Callable[[List[StoreDocument]], Union[None, Awaitable[None]]]
ErrorHandler = Callable[[Exception], Union[None, Awaitable[None]]]


def records_path(app_id: str, uid: str) -> str:
    """Collection path holding one identity's daily records"""
    if not uid:
        raise ValueError("uid is required to scope a records path")
    return f"artifacts/{app_id}/users/{uid}/daily_records"


class RecordStore(Protocol):
    """Subscribe/mutate API of the remote store"""

    async def subscribe(
        self,
        path: str,
        on_snapshot: SnapshotHandler,
        on_error: ErrorHandler,
    ) -> SubscriptionHandle:
        """Register for snapshots; the current snapshot is delivered immediately"""
        ...

    async def unsubscribe(self, handle: SubscriptionHandle) -> None:
        ...

    async def create(self, path: str, fields: Mapping[str, Any]) -> str:
        """Add a document and return its store-assigned id"""
        ...

    async def update(self, path: str, record_id: str, fields: Mapping[str, Any]) -> None:
        """Overwrite a document. Raises RecordNotFound if it does not exist"""
        ...

    async def delete(self, path: str, record_id: str) -> None:
        """Remove a document. A missing id is a no-op"""
        ...


async def _invoke(handler: Callable[..., Any], *args: Any) -> None:
    if inspect.iscoroutinefunction(handler):
        await handler(*args)
    else:
        result = handler(*args)
        if inspect.isawaitable(result):
            await result


@dataclass
class _Listener:
    handle: SubscriptionHandle
    on_snapshot: SnapshotHandler
    on_error: ErrorHandler


class SnapshotPublisher:
    """Per-path listener registry shared by the store implementations."""

    def __init__(self):
        self._listeners: Dict[str, Dict[str, _Listener]] = {}

    def add(self, path: str, on_snapshot: SnapshotHandler, on_error: ErrorHandler) -> SubscriptionHandle:
        handle = SubscriptionHandle(path=path)
        self._listeners.setdefault(path, {})[handle.handle_id] = _Listener(handle, on_snapshot, on_error)
        return handle

    def remove(self, handle: SubscriptionHandle) -> bool:
        listeners = self._listeners.get(handle.path, {})
        removed = listeners.pop(handle.handle_id, None) is not None
        if not listeners:
            self._listeners.pop(handle.path, None)
        return removed

    def count(self, path: str) -> int:
        return len(self._listeners.get(path, {}))

    async def deliver(self, handle: SubscriptionHandle, documents: List[StoreDocument]) -> None:
        listener = self._listeners.get(handle.path, {}).get(handle.handle_id)
        if listener is not None:
            await self._notify(listener, list(documents))

    async def publish(self, path: str, documents: List[StoreDocument]) -> None:
        for listener in list(self._listeners.get(path, {}).values()):
            # Each listener gets its own list
            await self._notify(listener, list(documents))

    async def fail(self, path: str, exc: Exception) -> None:
        """Report an error to every listener of a path and drop them"""
        listeners = list(self._listeners.pop(path, {}).values())
        for listener in listeners:
            try:
                await _invoke(listener.on_error, exc)
            except Exception:
                logger.exception("Store error handler failed for %s", path)

    async def _notify(self, listener: _Listener, documents: List[StoreDocument]) -> None:
        try:
            await _invoke(listener.on_snapshot, documents)
        except Exception:
            # A failing consumer must not turn a committed write into an error
            logger.exception("Snapshot handler failed for %s", listener.handle.path)
