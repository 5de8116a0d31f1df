"""
Record wire shape.

The store round-trips exactly these field names: branch, date, sales,
wage, commission, updatedAt. The record id travels separately.
"""

from __future__ import annotations

import datetime as dt
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from wage_tracker.domain.models import Record
from wage_tracker.utils.money import to_decimal
from wage_tracker.utils.time import parse_iso_datetime

logger = logging.getLogger(__name__)

WIRE_FIELDS = ("branch", "date", "sales", "wage", "commission", "updatedAt")


class RecordDocument(BaseModel):
    """Fields written to the store on create/update (full overwrite)"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    branch: str
    date: dt.date
    sales: Decimal = Field(..., ge=0)
    wage: Decimal
    commission: Decimal
    updated_at: dt.datetime = Field(..., alias="updatedAt")

    def to_fields(self) -> Dict[str, Any]:
        return {
            "branch": self.branch,
            "date": self.date.isoformat(),
            "sales": self.sales,
            "wage": self.wage,
            "commission": self.commission,
            "updatedAt": self.updated_at.isoformat(),
        }


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _parse_amount(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return to_decimal(value)
    except ValueError:
        return None


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return parse_iso_datetime(value)
        except ValueError:
            return None
    return None


def decode_record(record_id: str, fields: Mapping[str, Any]) -> Record:
    """
    Build a Record from a store document.

    Never fails: a missing or malformed field decodes to None so that one
    partially written document cannot break a whole snapshot.
    """
    branch = fields.get("branch")
    record = Record(
        id=str(record_id),
        branch=str(branch) if branch is not None else None,
        date=_parse_date(fields.get("date")),
        sales=_parse_amount(fields.get("sales")),
        wage=_parse_amount(fields.get("wage")),
        commission=_parse_amount(fields.get("commission")),
        updated_at=_parse_timestamp(fields.get("updatedAt")),
    )
    if record.date is None or record.branch is None:
        logger.debug("Decoded partial record %s: %s", record_id, dict(fields))
    return record


def record_to_wire(record: Record) -> Dict[str, Any]:
    """JSON representation for API consumers"""
    return {
        "id": record.id,
        "branch": record.branch,
        "date": record.date.isoformat() if record.date else None,
        "sales": float(record.sales) if record.sales is not None else None,
        "wage": float(record.wage) if record.wage is not None else None,
        "commission": float(record.commission) if record.commission is not None else None,
        "updatedAt": record.updated_at.isoformat() if record.updated_at else None,
    }
