from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class RewardSnapshot:
    reward_id: int
    name: str
    description: str
    rarity: str
    stars: int
    icon: str
    is_rank_prize: bool


@dataclass(slots=True)
class RewardAssignmentSnapshot:
    assignment_id: int
    player_id: int
    reward: RewardSnapshot
    assigned_at: datetime
    expires_at: datetime | None

    def is_expired(self, now_utc: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now_utc


@dataclass(slots=True)
class RewardBatchResult:
    rank_target: str
    reward_id: int
    assignments: tuple[RewardAssignmentSnapshot, ...]
