"""
End-to-end runtime flow: sign-in, live sync, totals and identity switches
against the in-memory and SQL stores.
"""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from wage_tracker.domain.errors import NoActiveSession
from wage_tracker.domain.models import SyncState, Totals
from wage_tracker.infrastructure.identity.token_provider import TokenIdentityProvider
from wage_tracker.infrastructure.store.base import records_path
from wage_tracker.realtime.runtime import VIEW_CHANGED, EarningsRuntime
from wage_tracker.services.session_manager import SessionManager

pytestmark = pytest.mark.integration

APP_ID = "test-app"


def _build_runtime(store, branches, token="first-token-aaa", **kwargs):
    provider = TokenIdentityProvider(token)
    runtime = EarningsRuntime(
        store=store,
        branches=branches,
        session_manager=SessionManager(provider),
        app_id=APP_ID,
        **kwargs,
    )
    return runtime, provider


async def _wait_for_state(runtime, state, timeout=1.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while runtime.state != state:
        if loop.time() > deadline:
            raise AssertionError(f"runtime stayed {runtime.state.value}, expected {state.value}")
        await asyncio.sleep(0.01)


async def _assert_alpha_beta_totals(runtime):
    assert await runtime.start()
    assert runtime.state == SyncState.LIVE
    assert runtime.totals == Totals()

    first_id = await runtime.controller.create("Alpha", "2024-01-01", 9000)
    await runtime.controller.create("Beta", "2024-01-02", 6500)

    view = runtime.view()
    assert [r.branch for r in view.records] == ["Beta", "Alpha"]
    assert view.totals.wage == Decimal("1500")
    assert view.totals.commission == Decimal("367.5")
    assert view.totals.sales == Decimal("15500")

    await runtime.controller.delete(first_id)

    view = runtime.view()
    assert [r.date for r in view.records] == [date(2024, 1, 2)]
    assert view.totals == Totals(wage=Decimal("800"), commission=Decimal("97.5"), sales=Decimal("6500"))


@pytest.mark.asyncio
async def test_records_and_totals_follow_the_store(runtime):
    await _assert_alpha_beta_totals(runtime)


@pytest.mark.asyncio
async def test_records_and_totals_follow_the_sql_store(sql_store, branches):
    runtime, _ = _build_runtime(sql_store, branches)
    await _assert_alpha_beta_totals(runtime)

    await runtime.controller.create("Alpha", "2024-01-03", "6000.0001")

    newest = runtime.records[0]
    assert newest.sales == Decimal("6000.0001")
    assert newest.commission == Decimal("90.0000015")
    assert runtime.totals.commission == Decimal("187.5000015")
    await runtime.stop()


@pytest.mark.asyncio
async def test_view_changes_are_published(runtime):
    views = []
    runtime.subscribe(VIEW_CHANGED, views.append)
    await runtime.start()

    await runtime.controller.create("Alpha", "2024-01-01", 6000)

    assert views[-1].totals.commission == Decimal("90")
    assert len(views[-1].records) == 1
    assert not views[-1].is_loading


@pytest.mark.asyncio
async def test_identity_switch_releases_previous_subscription(memory_store, branches):
    runtime, provider = _build_runtime(memory_store, branches)
    await runtime.start()
    await runtime.controller.create("Alpha", "2024-01-01", 9000)
    old_path = runtime.current_scope()
    assert memory_store.subscriber_count(old_path) == 1

    provider._custom_token = "second-token-bbb"
    await runtime.start()

    new_path = runtime.current_scope()
    assert new_path != old_path
    assert memory_store.subscriber_count(old_path) == 0
    assert memory_store.subscriber_count(new_path) == 1
    assert runtime.records == ()
    assert runtime.totals == Totals()

    await runtime.controller.create("Beta", "2024-01-02", 100)
    assert len(memory_store.documents(old_path)) == 1
    assert len(memory_store.documents(new_path)) == 1
    await runtime.stop()


@pytest.mark.asyncio
async def test_sign_out_clears_view(memory_store, branches):
    runtime, _ = _build_runtime(memory_store, branches)
    await runtime.start()
    await runtime.controller.create("Alpha", "2024-01-01", 9000)
    path = runtime.current_scope()

    await runtime._session_manager.sign_out()

    assert runtime.records == ()
    assert runtime.totals == Totals()
    assert memory_store.subscriber_count(path) == 0
    with pytest.raises(NoActiveSession):
        await runtime.controller.create("Alpha", "2024-01-02", 100)
    await runtime.stop()


@pytest.mark.asyncio
async def test_failed_sign_in_leaves_runtime_not_ready(memory_store, branches):
    runtime, _ = _build_runtime(memory_store, branches, token="bad token!")

    assert await runtime.start() is False
    assert not runtime.is_ready
    assert runtime.state == SyncState.IDLE
    with pytest.raises(NoActiveSession):
        await runtime.controller.create("Alpha", "2024-01-01", 100)
    await runtime.stop()


@pytest.mark.asyncio
async def test_store_error_degrades_without_reconnect(memory_store, branches):
    runtime, _ = _build_runtime(memory_store, branches)
    await runtime.start()
    await runtime.controller.create("Alpha", "2024-01-01", 9000)

    await memory_store.emit_error(runtime.current_scope(), ConnectionError("stream reset"))
    await asyncio.sleep(0.05)

    assert runtime.state == SyncState.DEGRADED
    assert runtime.records == ()
    assert runtime.totals == Totals()
    await runtime.stop()


@pytest.mark.asyncio
async def test_reconnect_restores_live_sync(memory_store, branches):
    runtime, _ = _build_runtime(
        memory_store,
        branches,
        reconnect_enabled=True,
        reconnect_base_delay=0.01,
        reconnect_max_delay=0.05,
    )
    await runtime.start()
    await runtime.controller.create("Alpha", "2024-01-01", 9000)
    path = records_path(APP_ID, runtime.session.uid)

    await memory_store.emit_error(path, ConnectionError("stream reset"))
    assert runtime.state == SyncState.DEGRADED

    await _wait_for_state(runtime, SyncState.LIVE)

    assert len(runtime.records) == 1
    assert runtime.totals.wage == Decimal("700")
    assert memory_store.subscriber_count(path) == 1
    await runtime.stop()
