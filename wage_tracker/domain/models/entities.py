"""
DOMAIN MODELS - EARNINGS

Immutable structures for branches, daily records, totals and sessions.
Records handed to readers are frozen so that a snapshot can be shared
without copying.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


# ============================================
# ENUMS
# ============================================

class SyncState(str, Enum):
    """Lifecycle of a sync engine subscription"""
    IDLE = "IDLE"
    SUBSCRIBING = "SUBSCRIBING"
    LIVE = "LIVE"
    DEGRADED = "DEGRADED"
    STOPPED = "STOPPED"


# ============================================
# BRANCHES
# ============================================

@dataclass(frozen=True)
class BranchConfig:
    """A fixed work location and its flat daily wage"""
    branch_id: str
    wage: Decimal

    def __post_init__(self):
        if not self.branch_id:
            raise ValueError("Branch identifier must not be empty")
        if self.wage < Decimal('0'):
            raise ValueError(f"Wage for {self.branch_id} must be non-negative")


# ============================================
# RECORDS
# ============================================

@dataclass(frozen=True)
class Record:
    """
    One day's earnings as held by the store.

    wage and commission are snapshots taken at save time and are never
    recomputed on read. Fields are optional because a partially written
    document must still be representable.
    """
    id: str
    branch: Optional[str]
    date: Optional[date]
    sales: Optional[Decimal]
    wage: Optional[Decimal]
    commission: Optional[Decimal]
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Totals:
    """Sums over the current record set. Derived, never persisted."""
    wage: Decimal = Decimal('0')
    commission: Decimal = Decimal('0')
    sales: Decimal = Decimal('0')

    @property
    def total_income(self) -> Decimal:
        return self.wage + self.commission


@dataclass(frozen=True)
class EditDraft:
    """Inputs surfaced from a record for the next update call"""
    record_id: str
    branch: Optional[str]
    date: Optional[date]
    sales: Optional[Decimal]


# ============================================
# IDENTITY
# ============================================

@dataclass(frozen=True)
class Identity:
    """Opaque identity yielded by the identity provider"""
    uid: str
    token: str
    is_anonymous: bool = False

    def __repr__(self) -> str:
        return f"Identity(uid={self.uid!r}, is_anonymous={self.is_anonymous})"


@dataclass(frozen=True)
class Session:
    """The single signed-in session of this process"""
    identity: Identity
    started_at: datetime

    @property
    def uid(self) -> str:
        return self.identity.uid
