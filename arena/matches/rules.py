from __future__ import annotations

from dataclasses import replace

from arena.ledger.tiers import rank_tier_for
from arena.matches.constants import (
    LOSS_POINTS,
    MATCH_STATUS_APPROVED,
    MATCH_STATUS_PENDING,
    MATCH_STATUS_REJECTED,
    WIN_POINTS,
)
from arena.matches.errors import MatchAlreadyDecidedError
from arena.matches.types import ArenaStats, MatchDecision, StatLine


def target_status(decision: MatchDecision) -> str:
    if decision == MatchDecision.APPROVE:
        return MATCH_STATUS_APPROVED
    return MATCH_STATUS_REJECTED


def ensure_transition(match_id: int, current_status: str) -> None:
    """Only pending matches may be decided; terminal states are final."""
    if current_status != MATCH_STATUS_PENDING:
        raise MatchAlreadyDecidedError(match_id, current_status)


def apply_win(stats: StatLine) -> StatLine:
    points = stats.points + WIN_POINTS
    return replace(
        stats,
        points=points,
        wins=stats.wins + 1,
        win_streak=stats.win_streak + 1,
        rank_tier=rank_tier_for(points),
    )


def apply_loss(stats: StatLine) -> StatLine:
    points = max(0, stats.points - LOSS_POINTS)
    return replace(
        stats,
        points=points,
        losses=stats.losses + 1,
        win_streak=0,
        rank_tier=rank_tier_for(points),
    )


def ledger_changes(stats: StatLine) -> dict[str, int]:
    return {
        "points": stats.points,
        "wins": stats.wins,
        "losses": stats.losses,
        "win_streak": stats.win_streak,
    }


def arena_stats(wins: int, losses: int) -> ArenaStats:
    total = wins + losses
    return ArenaStats(
        total_matches=total,
        wins=wins,
        losses=losses,
        win_rate=round(wins / total * 100, 1) if total > 0 else 0.0,
    )
