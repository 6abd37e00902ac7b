from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


def ensure_utc(value: datetime) -> datetime:
    """Attaches UTC to naive values read back from engines that drop tzinfo."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_date(now_utc: datetime, tz_name: str) -> date:
    return ensure_utc(now_utc).astimezone(ZoneInfo(tz_name)).date()
