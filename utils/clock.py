from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_db_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Format as fixed-width UTC ISO 8601 so stored timestamps sort as text."""
    if value is None:
        return None
    return ensure_utc(value).isoformat(timespec="seconds")


def end_of_review_day(now: datetime, day_end_hour: int = 4) -> datetime:
    """Return the next local ``day_end_hour`` o'clock at or after ``now``.

    Reviewing late at night still counts towards the previous day until the
    rollover hour.
    """
    local_now = ensure_utc(now).astimezone()
    rollover = local_now.replace(hour=day_end_hour, minute=0, second=0, microsecond=0)
    if local_now.hour >= day_end_hour:
        rollover = rollover + timedelta(days=1)
    return rollover
