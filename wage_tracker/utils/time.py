"""Time utilities."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from wage_tracker.config import settings


def local_tz() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def now_utc() -> datetime:
    return datetime.now(tz=timezone.utc)


def today_local() -> date:
    """Calendar date in the configured timezone (default for new records)."""
    return datetime.now(local_tz()).date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO timestamp; naive values are assumed to be UTC."""
    # fromisoformat rejects the trailing "Z" on older interpreters
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
