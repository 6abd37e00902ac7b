from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class PlayerRegisterRequest(BaseModel):
    account_id: str = Field(min_length=1, max_length=64)
    zone_id: str = Field(default="", max_length=32)
    display_name: str = Field(min_length=1, max_length=64)
    bio: str | None = Field(default=None, max_length=500)
    main_hero: str | None = Field(default=None, max_length=64)
    avatar_url: str | None = None
    socials: dict[str, str] = Field(default_factory=dict)


class PlayerUpdateRequest(BaseModel):
    display_name: str | None = Field(default=None, min_length=1, max_length=64)
    bio: str | None = Field(default=None, max_length=500)
    main_hero: str | None = Field(default=None, max_length=64)
    avatar_url: str | None = None
    socials: dict[str, str] | None = None
    is_banned: bool | None = None
    points: int | None = Field(default=None, ge=0)


class PlayerResponse(BaseModel):
    id: int
    account_id: str
    zone_id: str
    display_name: str
    points: int
    wins: int
    losses: int
    win_streak: int
    rank_tier: str
    is_banned: bool
    last_daily_claim_at: datetime | None = None
    bio: str | None = None
    main_hero: str | None = None
    avatar_url: str | None = None
    socials: dict[str, str]


class MatchReportRequest(BaseModel):
    winner_account_id: str = Field(min_length=1, max_length=64)
    winner_zone_id: str = Field(default="", max_length=32)
    loser_account_id: str = Field(min_length=1, max_length=64)
    loser_zone_id: str = Field(default="", max_length=32)
    proof_ref: str | None = None
    winner_hero: str | None = Field(default=None, max_length=64)
    loser_hero: str | None = Field(default=None, max_length=64)


class MatchResponse(BaseModel):
    id: int
    winner_account_id: str
    winner_zone_id: str
    loser_account_id: str
    loser_zone_id: str
    winner_hero: str | None = None
    loser_hero: str | None = None
    proof_ref: str | None = None
    status: str
    created_at: datetime
    decided_at: datetime | None = None


class PendingMatchResponse(MatchResponse):
    winner_name: str
    loser_name: str


class MatchHistoryItemResponse(MatchResponse):
    result: Literal["win", "loss"]


class ArenaStatsResponse(BaseModel):
    total_matches: int = Field(ge=0)
    wins: int = Field(ge=0)
    losses: int = Field(ge=0)
    win_rate: float = Field(ge=0.0, le=100.0)


class DecisionResponse(BaseModel):
    match: MatchResponse
    winner_ranked_up: bool
    activity_ids: list[int]


class DailyClaimResponse(BaseModel):
    player_id: int
    points_granted: int
    points_after: int
    rank_tier: str
    ranked_up: bool
    claimed_at: datetime
    claim_local_date: date


class RewardCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    description: str = Field(default="", max_length=1000)
    rarity: Literal["rare", "epic", "legendary", "mythic"]
    stars: int = Field(default=1, ge=1, le=7)
    icon: str = Field(min_length=1)
    is_rank_prize: bool = False


class RewardUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=128)
    description: str | None = Field(default=None, max_length=1000)
    rarity: Literal["rare", "epic", "legendary", "mythic"] | None = None
    stars: int | None = Field(default=None, ge=1, le=7)
    icon: str | None = Field(default=None, min_length=1)
    is_rank_prize: bool | None = None


class RewardResponse(BaseModel):
    id: int
    name: str
    description: str
    rarity: str
    stars: int
    icon: str
    is_rank_prize: bool


class RewardAssignRequest(BaseModel):
    reward_id: int = Field(gt=0)
    expires_at: datetime | None = None


class RewardBatchRequest(BaseModel):
    rank_target: Literal["top1", "top2", "top3", "top10"]
    reward_id: int = Field(gt=0)
    expires_days: int | None = Field(default=None, ge=0, le=3650)


class RewardAssignmentResponse(BaseModel):
    id: int
    player_id: int
    reward: RewardResponse
    assigned_at: datetime
    expires_at: datetime | None = None
    is_expired: bool


class RewardBatchResponse(BaseModel):
    rank_target: str
    reward_id: int
    assignments: list[RewardAssignmentResponse]


class PlayerProfileResponse(BaseModel):
    player: PlayerResponse
    history: list[MatchHistoryItemResponse]
    arena_stats: ArenaStatsResponse
    rewards: list[RewardAssignmentResponse]


class ReactionRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=64)
    emoji: str = Field(min_length=1, max_length=16)


class ReactionToggleResponse(BaseModel):
    activity_id: int
    emoji: str
    active: bool


class ReactionResponse(BaseModel):
    id: int
    user_id: str
    emoji: str


class ActivityResponse(BaseModel):
    id: int
    type: str
    player_id: int | None = None
    player_display_name: str | None = None
    data: dict[str, Any]
    created_at: datetime
    reactions: list[ReactionResponse]
    reaction_counts: dict[str, int]
