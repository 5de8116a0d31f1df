"""
Daily record API Routes

Mutations return as soon as the store accepts them. The records list
reflects a change once the store's next snapshot has been applied.
"""

import datetime as dt
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from wage_tracker.api.dependencies import get_runtime
from wage_tracker.domain.schemas.record import record_to_wire
from wage_tracker.realtime.runtime import EarningsRuntime
from wage_tracker.utils.time import today_local

router = APIRouter()


# -------------------------------------------------------------------
# Request / Response models
# -------------------------------------------------------------------

class RecordRequest(BaseModel):
    """Inputs of a create or full update"""
    branch: str = Field(..., description="Branch identifier")
    date: Optional[dt.date] = Field(None, description="Calendar date (YYYY-MM-DD), today when omitted")
    sales: Decimal = Field(..., description="Day's sales amount")


class RecordResponse(BaseModel):
    id: str
    branch: Optional[str] = None
    date: Optional[str] = None
    sales: Optional[float] = None
    wage: Optional[float] = None
    commission: Optional[float] = None
    updatedAt: Optional[str] = None


class TotalsResponse(BaseModel):
    wage: float
    commission: float
    sales: float
    total_income: float
    count: int


class MutationResponse(BaseModel):
    id: str


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------

@router.get("", response_model=List[RecordResponse])
async def list_records(runtime: EarningsRuntime = Depends(get_runtime)):
    return [record_to_wire(record) for record in runtime.view().records]


@router.get("/totals", response_model=TotalsResponse)
async def get_totals(runtime: EarningsRuntime = Depends(get_runtime)):
    view = runtime.view()
    return TotalsResponse(
        wage=float(view.totals.wage),
        commission=float(view.totals.commission),
        sales=float(view.totals.sales),
        total_income=float(view.totals.total_income),
        count=len(view.records),
    )


@router.post("", response_model=MutationResponse, status_code=201)
async def create_record(request: RecordRequest, runtime: EarningsRuntime = Depends(get_runtime)):
    record_id = await runtime.controller.create(request.branch, request.date or today_local(), request.sales)
    return MutationResponse(id=record_id)


@router.put("/{record_id}", response_model=MutationResponse)
async def update_record(
    record_id: str,
    request: RecordRequest,
    runtime: EarningsRuntime = Depends(get_runtime),
):
    await runtime.controller.update(record_id, request.branch, request.date or today_local(), request.sales)
    return MutationResponse(id=record_id)


@router.delete("/{record_id}", status_code=204)
async def delete_record(record_id: str, runtime: EarningsRuntime = Depends(get_runtime)):
    await runtime.controller.delete(record_id)
    return Response(status_code=204)
