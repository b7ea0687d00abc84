"""Timezone helpers. All stored timestamps are timezone-aware UTC."""

from datetime import datetime, timezone
from typing import Optional


def now_utc() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        # SQLite drops tzinfo on read
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
