from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(slots=True)
class DailyClaimResult:
    player_id: int
    points_granted: int
    points_after: int
    rank_tier: str
    ranked_up: bool
    claimed_at: datetime
    claim_local_date: date
