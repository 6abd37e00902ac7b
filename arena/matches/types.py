from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from arena.ledger.types import PlayerRef


class MatchDecision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class MatchResult(str, Enum):
    WIN = "win"
    LOSS = "loss"


@dataclass(slots=True)
class MatchSnapshot:
    match_id: int
    winner: PlayerRef
    loser: PlayerRef
    winner_hero: str | None
    loser_hero: str | None
    proof_ref: str | None
    status: str
    created_at: datetime
    decided_at: datetime | None


@dataclass(slots=True)
class PendingMatchView:
    match: MatchSnapshot
    winner_name: str
    loser_name: str


@dataclass(slots=True)
class MatchHistoryEntry:
    match: MatchSnapshot
    result: MatchResult


@dataclass(slots=True)
class ArenaStats:
    total_matches: int
    wins: int
    losses: int
    win_rate: float


@dataclass(frozen=True, slots=True)
class StatLine:
    points: int
    wins: int
    losses: int
    win_streak: int
    rank_tier: str


@dataclass(slots=True)
class DecisionResult:
    match: MatchSnapshot
    winner_after: StatLine | None
    loser_after: StatLine | None
    winner_ranked_up: bool
    activity_ids: tuple[int, ...]
