from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class PlayerRef:
    account_id: str
    zone_id: str = ""

    def __str__(self) -> str:
        return f"{self.account_id}({self.zone_id})" if self.zone_id else self.account_id


@dataclass(slots=True)
class PlayerSnapshot:
    player_id: int
    account_id: str
    zone_id: str
    display_name: str
    points: int
    wins: int
    losses: int
    win_streak: int
    rank_tier: str
    is_banned: bool
    last_daily_claim_at: datetime | None
    bio: str | None
    main_hero: str | None
    avatar_url: str | None
    socials: dict[str, str]
    created_at: datetime

    @property
    def ref(self) -> PlayerRef:
        return PlayerRef(account_id=self.account_id, zone_id=self.zone_id)
