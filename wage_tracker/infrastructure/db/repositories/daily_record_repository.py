"""
Daily Record Repository
CRUD operations for daily record documents
"""

import uuid
from typing import Any, List, Mapping, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from wage_tracker.infrastructure.db.models import DailyRecordModel
from wage_tracker.utils.money import to_decimal


def _amount(value: Any) -> str:
    """Amounts are stored as exact decimal text"""
    return str(to_decimal(value))


class DailyRecordRepository:
    """Repository for daily records"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_for_path(self, collection_path: str) -> List[DailyRecordModel]:
        result = await self.session.execute(
            select(DailyRecordModel)
            .where(DailyRecordModel.collection_path == collection_path)
            .order_by(DailyRecordModel.created_at, DailyRecordModel.id)
        )
        return list(result.scalars().all())

    async def get(self, collection_path: str, record_id: str) -> Optional[DailyRecordModel]:
        result = await self.session.execute(
            select(DailyRecordModel).where(
                DailyRecordModel.collection_path == collection_path,
                DailyRecordModel.id == record_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, collection_path: str, fields: Mapping[str, Any]) -> str:
        model = DailyRecordModel(
            id=uuid.uuid4().hex,
            collection_path=collection_path,
            branch=fields["branch"],
            date=fields["date"],
            sales=_amount(fields["sales"]),
            wage=_amount(fields["wage"]),
            commission=_amount(fields["commission"]),
            updated_at=fields["updatedAt"],
        )
        self.session.add(model)
        await self.session.flush()
        return model.id

    async def overwrite(
        self,
        collection_path: str,
        record_id: str,
        fields: Mapping[str, Any],
    ) -> Optional[DailyRecordModel]:
        """Replace every document field. Returns None if the record does not exist"""
        existing = await self.get(collection_path, record_id)
        if existing is None:
            return None
        existing.branch = fields["branch"]
        existing.date = fields["date"]
        existing.sales = _amount(fields["sales"])
        existing.wage = _amount(fields["wage"])
        existing.commission = _amount(fields["commission"])
        existing.updated_at = fields["updatedAt"]
        await self.session.flush()
        return existing

    async def delete(self, collection_path: str, record_id: str) -> bool:
        result = await self.session.execute(
            delete(DailyRecordModel).where(
                DailyRecordModel.collection_path == collection_path,
                DailyRecordModel.id == record_id,
            )
        )
        return (result.rowcount or 0) > 0
