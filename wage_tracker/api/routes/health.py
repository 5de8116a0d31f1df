from fastapi import APIRouter, Depends

from wage_tracker.api.dependencies import get_runtime
from wage_tracker.domain.models import SyncState
from wage_tracker.realtime.runtime import EarningsRuntime

router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/ready")
async def ready(runtime: EarningsRuntime = Depends(get_runtime)):
    view = runtime.view()
    is_live = view.state == SyncState.LIVE
    return {
        "status": "ready" if runtime.is_ready and is_live else "not_ready",
        "session": runtime.is_ready,
        "sync_state": view.state.value,
        "loading": view.is_loading,
    }
