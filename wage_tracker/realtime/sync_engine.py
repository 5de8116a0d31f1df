"""
Sync engine: live, ordered local projection of one identity's records.

Every store notification carries the full collection. The engine replaces
its record set wholesale, sorts it by date descending and publishes the
new tuple. Ties on date keep the order the store delivered, which the
store does not promise to keep stable between notifications.

States: IDLE → SUBSCRIBING → LIVE ⇄ DEGRADED, terminal STOPPED.
DEGRADED is left only through a fresh start(); the engine never retries
on its own.
"""

from __future__ import annotations

import logging
from datetime import date
from functools import partial
from typing import Any, Callable, List, Optional, Set, Tuple

from wage_tracker.domain.errors import (
    EngineStopped,
    NoActiveSession,
    StoreUnavailable,
    SyncEngineError,
)
from wage_tracker.domain.models import Identity, Record, SyncState
from wage_tracker.domain.schemas.record import decode_record
from wage_tracker.infrastructure.store.base import (
    RecordStore,
    StoreDocument,
    SubscriptionHandle,
    records_path,
)
from wage_tracker.realtime.subscriber_registry import SubscriberRegistry

logger = logging.getLogger(__name__)

RECORDS_CHANGED = "records_changed"
STATE_CHANGED = "state_changed"
SYNC_ERROR = "error"

# Legal transitions: (from_state, to_state). Any state may move to STOPPED.
_TRANSITIONS: Set[Tuple[SyncState, SyncState]] = {
    (SyncState.IDLE, SyncState.SUBSCRIBING),
    (SyncState.SUBSCRIBING, SyncState.LIVE),
    (SyncState.SUBSCRIBING, SyncState.DEGRADED),
    (SyncState.LIVE, SyncState.DEGRADED),
    (SyncState.DEGRADED, SyncState.SUBSCRIBING),
}


def _sort_key(record: Record) -> date:
    return record.date or date.min


def sort_records(records: List[Record]) -> Tuple[Record, ...]:
    """Date descending; sorted() is stable so ties keep delivery order"""
    return tuple(sorted(records, key=_sort_key, reverse=True))


class SyncEngine:
    def __init__(self, store: RecordStore, app_id: str):
        self._store = store
        self._app_id = app_id
        self._registry = SubscriberRegistry()

        self._state = SyncState.IDLE
        self._records: Tuple[Record, ...] = ()
        self._is_loading = False
        self._last_error: Optional[Exception] = None

        self._identity: Optional[Identity] = None
        self._path: Optional[str] = None
        self._handle: Optional[SubscriptionHandle] = None
        # Identifies the live subscription; callbacks from any other are stale
        self._token: Optional[object] = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._records

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def last_error(self) -> Optional[Exception]:
        return self._last_error

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def handle(self) -> Optional[SubscriptionHandle]:
        return self._handle

    @property
    def collection_path(self) -> str:
        if self._state == SyncState.STOPPED:
            raise EngineStopped()
        if self._path is None:
            raise NoActiveSession("Sync engine has not been started for an identity")
        return self._path

    def current_scope(self) -> str:
        """Collection path mutations must target"""
        return self.collection_path

    def subscribe(self, topic: str, handler: Callable[[Any], Any]) -> Callable[[], None]:
        return self._registry.subscribe(topic, handler)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self, identity: Optional[Identity]) -> SubscriptionHandle:
        """
        Open the change subscription for an identity's records.

        Raises:
            NoActiveSession: identity is missing
            EngineStopped: engine was stopped (before or during the call)
            SyncEngineError: a subscription is already open
            StoreUnavailable: the store rejected the subscription
        """
        if self._state == SyncState.STOPPED:
            raise EngineStopped()
        if identity is None or not identity.uid:
            raise NoActiveSession("Cannot start sync without an identity")
        if (self._state, SyncState.SUBSCRIBING) not in _TRANSITIONS:
            raise SyncEngineError(f"Cannot start sync engine from {self._state.value}")
        if self._identity is not None and self._identity.uid != identity.uid:
            raise SyncEngineError("Identity changed; stop this engine and start a new one")

        token = object()
        self._token = token
        self._identity = identity
        self._path = records_path(self._app_id, identity.uid)
        self._is_loading = True
        self._last_error = None
        await self._set_state(SyncState.SUBSCRIBING)

        try:
            handle = await self._store.subscribe(
                self._path,
                partial(self._on_snapshot, token),
                partial(self._on_error, token),
            )
        except Exception as exc:
            if self._state == SyncState.STOPPED:
                raise EngineStopped() from exc
            await self._on_error(token, exc)
            if isinstance(exc, StoreUnavailable):
                raise
            raise StoreUnavailable(f"Subscribe failed: {exc}") from exc

        if token is not self._token:
            # Stopped or failed while the subscription was being opened
            await self._store.unsubscribe(handle)
            if self._state == SyncState.STOPPED:
                raise EngineStopped()
            raise StoreUnavailable(f"Subscription failed: {self._last_error}")

        self._handle = handle
        logger.info("Sync live for %s", self._path)
        return handle

    async def stop(self, handle: Optional[SubscriptionHandle] = None) -> None:
        """Release the subscription. Safe to call at any time, more than once."""
        handles = [h for h in (self._handle, handle) if h is not None]
        already_stopped = self._state == SyncState.STOPPED

        # Invalidate first so in-flight notifications are dropped
        self._token = None
        self._handle = None
        self._records = ()
        self._is_loading = False
        if not already_stopped:
            await self._set_state(SyncState.STOPPED)

        for h in dict.fromkeys(handles):
            await self._store.unsubscribe(h)

    # ------------------------------------------------------------------
    # Store callbacks
    # ------------------------------------------------------------------

    async def _on_snapshot(self, token: object, documents: List[StoreDocument]) -> None:
        if token is not self._token:
            logger.debug("Dropping snapshot for an inactive subscription")
            return

        records = sort_records([decode_record(doc.id, doc.fields) for doc in documents])
        self._records = records
        self._is_loading = False
        if self._state != SyncState.LIVE:
            await self._set_state(SyncState.LIVE)
            # A state listener may have stopped the engine
            if token is not self._token:
                return
        await self._registry.publish(RECORDS_CHANGED, records)

    async def _on_error(self, token: object, exc: Exception) -> None:
        if token is not self._token:
            return

        logger.warning("Sync subscription error for %s: %s", self._path, exc)
        self._token = None
        self._handle = None
        self._records = ()
        self._is_loading = False
        self._last_error = exc
        await self._set_state(SyncState.DEGRADED)
        await self._registry.publish(SYNC_ERROR, exc)
        await self._registry.publish(RECORDS_CHANGED, self._records)

    async def _set_state(self, target: SyncState) -> None:
        if target != SyncState.STOPPED and (self._state, target) not in _TRANSITIONS:
            raise SyncEngineError(
                f"Illegal transition: {self._state.value} → {target.value}"
            )
        previous = self._state
        self._state = target
        logger.debug("Sync engine %s → %s", previous.value, target.value)
        await self._registry.publish(STATE_CHANGED, target)
