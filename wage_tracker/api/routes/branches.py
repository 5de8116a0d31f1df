"""
Branch & commission API Routes
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from wage_tracker.api.dependencies import get_runtime
from wage_tracker.domain.services.commission_engine import calculate_commission, commission_rate
from wage_tracker.realtime.runtime import EarningsRuntime

router = APIRouter()


class BranchResponse(BaseModel):
    id: str
    wage: float
    is_default: bool


class CommissionPreviewResponse(BaseModel):
    sales: float
    rate_pct: float
    commission: float


@router.get("/branches", response_model=List[BranchResponse])
async def list_branches(runtime: EarningsRuntime = Depends(get_runtime)):
    registry = runtime.branches
    default_id = registry.default_branch.branch_id
    return [
        BranchResponse(id=b.branch_id, wage=float(b.wage), is_default=b.branch_id == default_id)
        for b in registry.branches
    ]


@router.get("/commission", response_model=CommissionPreviewResponse)
async def preview_commission(sales: str = Query(..., description="Sales amount")):
    """Commission a sales amount would earn, without saving anything"""
    try:
        commission = calculate_commission(sales)
        rate = commission_rate(sales)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid sales amount: {sales}")
    return CommissionPreviewResponse(
        sales=float(sales),
        rate_pct=float(rate),
        commission=float(commission),
    )
