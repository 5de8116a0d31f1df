"""
FastAPI Main Application
Wires branches, store, identity and the realtime earnings runtime
"""

from contextlib import asynccontextmanager
from pathlib import Path
import logging
from typing import AsyncGenerator

from fastapi import FastAPI

from wage_tracker.api.errors import register_exception_handlers
from wage_tracker.api.routes import branches, health, records
from wage_tracker.config import settings
from wage_tracker.core.logging import setup_logging
from wage_tracker.domain.services.branch_registry import BranchRegistry
from wage_tracker.infrastructure.db.database import async_session_factory, close_db, init_db
from wage_tracker.infrastructure.identity.token_provider import TokenIdentityProvider
from wage_tracker.infrastructure.store.store_factory import get_record_store
from wage_tracker.realtime.runtime import EarningsRuntime
from wage_tracker.services.session_manager import SessionManager

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _branches_file() -> Path:
    path = Path(settings.BRANCHES_FILE)
    return path if path.is_absolute() else PROJECT_ROOT / path


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Handles startup and shutdown of the earnings runtime
    """
    # ===================
    # STARTUP
    # ===================
    logger.info("Starting wage tracker (env=%s, store=%s)", settings.APP_ENV, settings.STORE_BACKEND)

    branch_registry = BranchRegistry.from_yaml(_branches_file())
    logger.info("Loaded %d branches: %s", len(branch_registry), ", ".join(branch_registry.branch_ids))

    use_sql = settings.STORE_BACKEND.lower() == "sql"
    if use_sql and settings.AUTO_CREATE_TABLES:
        await init_db()

    store = get_record_store(settings.STORE_BACKEND, async_session_factory)
    session_manager = SessionManager(TokenIdentityProvider(settings.IDENTITY_TOKEN))
    runtime = EarningsRuntime(
        store=store,
        branches=branch_registry,
        session_manager=session_manager,
        app_id=settings.APP_ID,
        reconnect_enabled=settings.SYNC_RECONNECT_ENABLED,
        reconnect_base_delay=settings.SYNC_RECONNECT_BASE_DELAY,
        reconnect_max_delay=settings.SYNC_RECONNECT_MAX_DELAY,
    )
    app.state.runtime = runtime

    if await runtime.start():
        logger.info("Sync state: %s", runtime.state.value)
    else:
        logger.warning("Identity sign-in failed; record operations unavailable")

    yield

    # ===================
    # SHUTDOWN
    # ===================
    logger.info("Shutting down wage tracker")
    await runtime.stop()
    if use_sql:
        await close_db()


def include_routers(app: FastAPI) -> None:
    app.include_router(health.router, prefix="/api/v1", tags=["Health"])
    app.include_router(branches.router, prefix="/api/v1", tags=["Branches"])
    app.include_router(records.router, prefix="/api/v1/records", tags=["Records"])
    register_exception_handlers(app)


app = FastAPI(
    title="Wage Tracker",
    description="Daily wage and sales commission tracker",
    version="0.1.0",
    lifespan=lifespan,
)
include_routers(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("wage_tracker.main:app", host=settings.API_HOST, port=settings.API_PORT)
