"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    SyncState,

    # Entities
    BranchConfig,
    EditDraft,
    Identity,
    Record,
    Session,
    Totals,
)

__all__ = [
    # Enums
    "SyncState",

    # Entities
    "BranchConfig",
    "EditDraft",
    "Identity",
    "Record",
    "Session",
    "Totals",
]
