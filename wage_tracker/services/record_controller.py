"""
Record Controller
Turns create/update/delete intents into store mutations.

The controller never touches the local record set. Every successful
mutation comes back through the sync engine's next snapshot.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Awaitable, Callable, Optional, Protocol, Union

from wage_tracker.domain.errors import InvalidDate, InvalidSales, StoreUnavailable
from wage_tracker.domain.models import EditDraft, Record
from wage_tracker.domain.schemas.record import RecordDocument
from wage_tracker.domain.services.branch_registry import BranchRegistry
from wage_tracker.domain.services.commission_engine import calculate_commission
from wage_tracker.infrastructure.store.base import RecordStore
from wage_tracker.utils.money import Amount, to_decimal
from wage_tracker.utils.time import now_utc

logger = logging.getLogger(__name__)

DateInput = Union[date, str]


class CollectionScope(Protocol):
    def current_scope(self) -> str:
        """Path of the signed-in identity's collection.

        Raises NoActiveSession or EngineStopped when unavailable.
        """
        ...


def _validate_sales(sales: Amount) -> Decimal:
    try:
        amount = to_decimal(sales)
    except ValueError as exc:
        raise InvalidSales(f"Sales amount is not a number: {sales!r}") from exc
    if amount < Decimal('0'):
        raise InvalidSales(f"Sales amount must be non-negative, got {amount}")
    return amount


def _validate_date(record_date: DateInput) -> date:
    if isinstance(record_date, datetime):
        return record_date.date()
    if isinstance(record_date, date):
        return record_date
    if isinstance(record_date, str):
        try:
            return date.fromisoformat(record_date.strip())
        except ValueError as exc:
            raise InvalidDate(f"Not an ISO calendar date: {record_date!r}") from exc
    raise InvalidDate(f"Not a calendar date: {record_date!r}")


class RecordController:
    def __init__(
        self,
        store: RecordStore,
        registry: BranchRegistry,
        scope: CollectionScope,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._store = store
        self._registry = registry
        self._scope = scope
        self._clock = clock
        self._editing: Optional[EditDraft] = None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def build_document(self, branch_id: str, record_date: DateInput, sales: Amount) -> RecordDocument:
        """
        Validate inputs and compute the stored fields.

        Raises:
            InvalidSales, UnknownBranch, InvalidDate
        """
        amount = _validate_sales(sales)
        wage = self._registry.wage_for(branch_id)
        day = _validate_date(record_date)
        return RecordDocument(
            branch=branch_id,
            date=day,
            sales=amount,
            wage=wage,
            commission=calculate_commission(amount),
            updated_at=self._clock(),
        )

    async def create(self, branch_id: str, record_date: DateInput, sales: Amount) -> str:
        """
        Create a record and return its store-assigned id.

        Raises:
            InvalidSales, UnknownBranch, InvalidDate: before any remote call
            NoActiveSession, EngineStopped: no collection to write to
            StoreUnavailable: the store call failed
        """
        document = self.build_document(branch_id, record_date, sales)
        path = self._scope.current_scope()
        record_id = await self._call_store(
            "create", lambda: self._store.create(path, document.to_fields())
        )
        logger.debug("Created record %s (%s, %s)", record_id, document.branch, document.date)
        return record_id

    async def update(self, record_id: str, branch_id: str, record_date: DateInput, sales: Amount) -> None:
        """
        Overwrite a record with fields recomputed from the given inputs.

        Raises:
            RecordNotFound: the store has no such record (a StoreUnavailable)
        """
        if not record_id:
            raise ValueError("record_id is required")
        document = self.build_document(branch_id, record_date, sales)
        path = self._scope.current_scope()
        await self._call_store(
            "update", lambda: self._store.update(path, record_id, document.to_fields())
        )
        logger.debug("Updated record %s", record_id)

    async def delete(self, record_id: str) -> None:
        """Delete a record. Deleting an id that does not exist is a no-op."""
        if not record_id:
            raise ValueError("record_id is required")
        path = self._scope.current_scope()
        await self._call_store("delete", lambda: self._store.delete(path, record_id))
        if self._editing is not None and self._editing.record_id == record_id:
            self._editing = None
        logger.debug("Deleted record %s", record_id)

    async def _call_store(self, operation: str, call: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await call()
        except StoreUnavailable as exc:
            logger.warning("Store %s failed: %s", operation, exc)
            raise
        except Exception as exc:
            logger.warning("Store %s failed: %s", operation, exc)
            raise StoreUnavailable(f"{operation} failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Editing mode
    # ------------------------------------------------------------------

    @property
    def editing(self) -> Optional[EditDraft]:
        return self._editing

    def begin_edit(self, record: Record) -> EditDraft:
        """Surface a record's inputs as the next update's inputs"""
        self._editing = EditDraft(
            record_id=record.id,
            branch=record.branch,
            date=record.date,
            sales=record.sales,
        )
        return self._editing

    def cancel_edit(self) -> None:
        self._editing = None

    async def save(self, branch_id: str, record_date: DateInput, sales: Amount) -> str:
        """
        Form submit: update the record under edit, or create a new one.

        The edit draft is cleared only after a successful update.
        """
        draft = self._editing
        if draft is None:
            return await self.create(branch_id, record_date, sales)

        await self.update(draft.record_id, branch_id, record_date, sales)
        self._editing = None
        return draft.record_id
