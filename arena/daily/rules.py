from __future__ import annotations

from datetime import datetime

from arena.core.time import local_date


def claimed_on_same_day(
    last_claim_at: datetime | None,
    *,
    now_utc: datetime,
    tz_name: str,
) -> bool:
    """True when the previous claim shares the reference-zone calendar date with ``now_utc``."""
    if last_claim_at is None:
        return False
    return local_date(last_claim_at, tz_name) == local_date(now_utc, tz_name)
