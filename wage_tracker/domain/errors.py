"""
DOMAIN ERRORS

Every failure the core reports. None of them is fatal to the process:
validation errors are raised before any side effect, store errors leave
prior state untouched, and the sync engine reports transport errors by
moving to DEGRADED.
"""


class WageTrackerError(Exception):
    """Base class for all wage tracker errors."""
    pass


class AuthError(WageTrackerError):
    """Raised when the identity provider rejects a sign-in."""
    pass


class UnknownBranch(WageTrackerError, LookupError):
    """Raised when a branch identifier is not in the configured registry."""

    def __init__(self, branch_id: str):
        self.branch_id = branch_id
        super().__init__(f"Unknown branch: {branch_id!r}")


class InvalidSales(WageTrackerError, ValueError):
    """Raised when a sales amount is negative or not a number."""
    pass


class InvalidDate(WageTrackerError, ValueError):
    """Raised when a record date is not a calendar date."""
    pass


class NoActiveSession(WageTrackerError):
    """Raised when an operation needs an identity and none is signed in."""

    def __init__(self, message: str = "No active session"):
        super().__init__(message)


class StoreUnavailable(WageTrackerError):
    """Raised when a store subscribe or mutation call fails."""
    pass


class RecordNotFound(StoreUnavailable):
    """Raised by a store when an update targets a missing record."""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Record not found: {record_id}")


class EngineStopped(WageTrackerError):
    """Raised when an operation is attempted on a stopped sync engine."""

    def __init__(self, message: str = "Sync engine has been stopped"):
        super().__init__(message)


class SyncEngineError(WageTrackerError):
    """Raised on an illegal sync engine state transition."""
    pass
