"""
Map domain errors to HTTP responses.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from wage_tracker.domain.errors import (
    AuthError,
    EngineStopped,
    InvalidDate,
    InvalidSales,
    NoActiveSession,
    RecordNotFound,
    StoreUnavailable,
    UnknownBranch,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (InvalidSales, 422),
    (InvalidDate, 422),
    (UnknownBranch, 400),
    (AuthError, 401),
    (RecordNotFound, 404),
    (NoActiveSession, 503),
    (EngineStopped, 503),
    (StoreUnavailable, 503),
)


def register_exception_handlers(app: FastAPI) -> None:
    for error_cls, status_code in _STATUS_BY_ERROR:
        app.add_exception_handler(error_cls, _make_handler(status_code))


def _make_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        if status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    return handler
