from decimal import Decimal
from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from wage_tracker.domain.models import BranchConfig, Identity
from wage_tracker.domain.services.branch_registry import BranchRegistry
from wage_tracker.infrastructure.db.database import Base
from wage_tracker.infrastructure.identity.token_provider import TokenIdentityProvider
from wage_tracker.infrastructure.store.memory_store import InMemoryRecordStore
from wage_tracker.infrastructure.store.sql_store import SqlRecordStore
from wage_tracker.main import include_routers
from wage_tracker.realtime.runtime import EarningsRuntime
from wage_tracker.services.session_manager import SessionManager

APP_ID = "test-app"


@pytest.fixture
def branches() -> BranchRegistry:
    """Alpha pays 700 a day, Beta 800"""
    return BranchRegistry([
        BranchConfig(branch_id="Alpha", wage=Decimal("700")),
        BranchConfig(branch_id="Beta", wage=Decimal("800")),
    ])


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def identity() -> Identity:
    return Identity(uid="user-1", token="token-user-1")


@pytest.fixture
async def db_engine(tmp_path):
    db_path = tmp_path / "test.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", future=True, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def sql_store(session_factory) -> SqlRecordStore:
    return SqlRecordStore(session_factory)


@pytest.fixture
async def runtime(branches, memory_store) -> AsyncGenerator[EarningsRuntime, None]:
    session_manager = SessionManager(TokenIdentityProvider("test-token-0001"))
    runtime = EarningsRuntime(
        store=memory_store,
        branches=branches,
        session_manager=session_manager,
        app_id=APP_ID,
    )
    yield runtime
    await runtime.stop()


@pytest.fixture
async def app(runtime) -> FastAPI:
    app = FastAPI()
    include_routers(app)
    await runtime.start()
    app.state.runtime = runtime
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
