from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from arena.activity.payloads import ActivityPayload


class ActivityEventType(str, Enum):
    MATCH_APPROVED = "match_approved"
    RANK_UP = "rank_up"
    REWARD_EARNED = "reward_earned"
    NEW_PLAYER = "new_player"
    DAILY_CLAIM = "daily_claim"


@dataclass(slots=True)
class ReactionSnapshot:
    reaction_id: int
    user_id: str
    emoji: str
    created_at: datetime


@dataclass(slots=True)
class ActivitySnapshot:
    activity_id: int
    event_type: ActivityEventType
    player_id: int | None
    player_display_name: str | None
    payload: ActivityPayload
    created_at: datetime
    reactions: tuple[ReactionSnapshot, ...]

    @property
    def reaction_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for reaction in self.reactions:
            counts[reaction.emoji] = counts.get(reaction.emoji, 0) + 1
        return counts
