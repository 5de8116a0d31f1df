"""
Earnings runtime: session, sync engine, totals and record controller.

One sync engine per session. When the identity changes the current engine
is stopped before a new one starts, so two live subscriptions never
coexist.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Optional, Tuple

from wage_tracker.domain.errors import AuthError, NoActiveSession, StoreUnavailable
from wage_tracker.domain.models import Record, Session, SyncState, Totals
from wage_tracker.domain.services.aggregator import aggregate
from wage_tracker.domain.services.branch_registry import BranchRegistry
from wage_tracker.infrastructure.store.base import RecordStore
from wage_tracker.realtime.subscriber_registry import SubscriberRegistry
from wage_tracker.realtime.sync_engine import RECORDS_CHANGED, STATE_CHANGED, SyncEngine
from wage_tracker.services.record_controller import RecordController
from wage_tracker.services.session_manager import SessionManager

logger = logging.getLogger(__name__)

VIEW_CHANGED = "view_changed"


@dataclass(frozen=True)
class EarningsView:
    """Consistent snapshot handed to display consumers"""
    records: Tuple[Record, ...]
    totals: Totals
    state: SyncState
    is_loading: bool


class EarningsRuntime:
    def __init__(
        self,
        store: RecordStore,
        branches: BranchRegistry,
        session_manager: SessionManager,
        app_id: str,
        reconnect_enabled: bool = False,
        reconnect_base_delay: float = 1.0,
        reconnect_max_delay: float = 30.0,
    ):
        self._store = store
        self._branches = branches
        self._session_manager = session_manager
        self._app_id = app_id
        self._reconnect_enabled = reconnect_enabled
        self._reconnect_base_delay = reconnect_base_delay
        self._reconnect_max_delay = reconnect_max_delay

        self._engine: Optional[SyncEngine] = None
        self._totals = Totals()
        self._events = SubscriberRegistry()
        self._switch_lock = asyncio.Lock()
        self._reconnect_task: Optional[asyncio.Task] = None
        self._reconnect_attempt = 0

        self.controller = RecordController(store, branches, scope=self)
        self._unsubscribe_session = session_manager.on_session_changed(self._handle_session_changed)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def branches(self) -> BranchRegistry:
        return self._branches

    @property
    def session(self) -> Optional[Session]:
        return self._session_manager.current

    @property
    def engine(self) -> Optional[SyncEngine]:
        return self._engine

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._engine.records if self._engine else ()

    @property
    def totals(self) -> Totals:
        return self._totals

    @property
    def state(self) -> SyncState:
        return self._engine.state if self._engine else SyncState.IDLE

    @property
    def is_ready(self) -> bool:
        return self._session_manager.is_ready

    def view(self) -> EarningsView:
        engine = self._engine
        return EarningsView(
            records=engine.records if engine else (),
            totals=self._totals,
            state=engine.state if engine else SyncState.IDLE,
            is_loading=engine.is_loading if engine else False,
        )

    def current_scope(self) -> str:
        self._session_manager.require()
        if self._engine is None:
            raise NoActiveSession("No sync engine for the current session")
        return self._engine.current_scope()

    def subscribe(self, topic: str, handler: Callable[[Any], Any]) -> Callable[[], None]:
        return self._events.subscribe(topic, handler)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> bool:
        """Sign in and open the sync. Returns False if sign-in failed."""
        try:
            await self._session_manager.sign_in()
        except AuthError as exc:
            logger.warning("Runtime not ready: %s", exc)
            return False
        return True

    async def stop(self) -> None:
        self._unsubscribe_session()
        await self._cancel_reconnect()
        async with self._switch_lock:
            await self._stop_engine()
        self._session_manager.close()

    async def _handle_session_changed(self, session: Optional[Session]) -> None:
        async with self._switch_lock:
            await self._cancel_reconnect()
            await self._stop_engine()
            if session is None:
                self._totals = Totals()
                await self._events.publish(VIEW_CHANGED, self.view())
                return
            await self._start_engine(session)

    async def _start_engine(self, session: Session) -> None:
        engine = SyncEngine(self._store, self._app_id)
        engine.subscribe(RECORDS_CHANGED, partial(self._on_records_changed, engine))
        engine.subscribe(STATE_CHANGED, partial(self._on_state_changed, engine))
        self._engine = engine
        self._reconnect_attempt = 0
        try:
            await engine.start(session.identity)
        except StoreUnavailable as exc:
            logger.warning("Sync start failed for uid=%s: %s", session.uid, exc)

    async def _stop_engine(self) -> None:
        engine, self._engine = self._engine, None
        if engine is not None:
            await engine.stop()

    # ------------------------------------------------------------------
    # Engine events
    # ------------------------------------------------------------------

    async def _on_records_changed(self, engine: SyncEngine, records: Tuple[Record, ...]) -> None:
        if engine is not self._engine:
            return
        self._totals = aggregate(records)
        await self._events.publish(VIEW_CHANGED, self.view())

    async def _on_state_changed(self, engine: SyncEngine, state: SyncState) -> None:
        if engine is not self._engine:
            return
        if state == SyncState.LIVE:
            self._reconnect_attempt = 0
        elif state == SyncState.DEGRADED and self._reconnect_enabled:
            self._schedule_reconnect(engine)

    # ------------------------------------------------------------------
    # Reconnection (opt-in)
    # ------------------------------------------------------------------

    def _schedule_reconnect(self, engine: SyncEngine) -> None:
        task = self._reconnect_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            return
        delay = min(
            self._reconnect_base_delay * (2 ** self._reconnect_attempt),
            self._reconnect_max_delay,
        )
        self._reconnect_attempt += 1
        logger.info("Sync reconnect #%s in %.1fs", self._reconnect_attempt, delay)
        self._reconnect_task = asyncio.create_task(self._reconnect_after(delay, engine))

    async def _reconnect_after(self, delay: float, engine: SyncEngine) -> None:
        await asyncio.sleep(delay)
        session = self._session_manager.current
        if engine is not self._engine or engine.state != SyncState.DEGRADED or session is None:
            return
        try:
            await engine.start(session.identity)
        except StoreUnavailable as exc:
            logger.warning("Sync reconnect failed: %s", exc)

    async def _cancel_reconnect(self) -> None:
        task, self._reconnect_task = self._reconnect_task, None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            return
