from fastapi import HTTPException, Request

from wage_tracker.realtime.runtime import EarningsRuntime


def get_runtime(request: Request) -> EarningsRuntime:
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise HTTPException(status_code=503, detail="Runtime not initialized")
    return runtime
