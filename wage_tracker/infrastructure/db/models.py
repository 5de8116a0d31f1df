"""
Database Models (SQLAlchemy ORM)
One row per daily record document, scoped by collection path
"""

from sqlalchemy import Column, DateTime, Index, String

from wage_tracker.infrastructure.db.database import Base
from wage_tracker.utils.time import now_utc


class DailyRecordModel(Base):
    """A daily earnings document in a per-identity collection"""
    __tablename__ = "daily_records"

    id = Column(String(36), primary_key=True)
    collection_path = Column(String(255), nullable=False, index=True)

    branch = Column(String(100), nullable=False)
    date = Column(String(10), nullable=False)
    sales = Column(String(64), nullable=False)
    wage = Column(String(64), nullable=False)
    commission = Column(String(64), nullable=False)
    updated_at = Column(String(40), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)

    __table_args__ = (
        Index('ix_daily_records_path_created', 'collection_path', 'created_at'),
    )

    def to_fields(self) -> dict:
        return {
            "branch": self.branch,
            "date": self.date,
            "sales": self.sales,
            "wage": self.wage,
            "commission": self.commission,
            "updatedAt": self.updated_at,
        }
