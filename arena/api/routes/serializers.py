from __future__ import annotations

from dataclasses import asdict
from datetime import datetime

from arena.activity.types import ActivitySnapshot
from arena.ledger.types import PlayerSnapshot
from arena.matches.types import MatchHistoryEntry, MatchSnapshot, PendingMatchView
from arena.rewards.types import RewardAssignmentSnapshot, RewardSnapshot

from .models import (
    ActivityResponse,
    MatchHistoryItemResponse,
    MatchResponse,
    PendingMatchResponse,
    PlayerResponse,
    ReactionResponse,
    RewardAssignmentResponse,
    RewardResponse,
)


def player_response(player: PlayerSnapshot) -> PlayerResponse:
    return PlayerResponse(
        id=player.player_id,
        account_id=player.account_id,
        zone_id=player.zone_id,
        display_name=player.display_name,
        points=player.points,
        wins=player.wins,
        losses=player.losses,
        win_streak=player.win_streak,
        rank_tier=player.rank_tier,
        is_banned=player.is_banned,
        last_daily_claim_at=player.last_daily_claim_at,
        bio=player.bio,
        main_hero=player.main_hero,
        avatar_url=player.avatar_url,
        socials=player.socials,
    )


def _match_fields(match: MatchSnapshot) -> dict[str, object]:
    return {
        "id": match.match_id,
        "winner_account_id": match.winner.account_id,
        "winner_zone_id": match.winner.zone_id,
        "loser_account_id": match.loser.account_id,
        "loser_zone_id": match.loser.zone_id,
        "winner_hero": match.winner_hero,
        "loser_hero": match.loser_hero,
        "proof_ref": match.proof_ref,
        "status": match.status,
        "created_at": match.created_at,
        "decided_at": match.decided_at,
    }


def match_response(match: MatchSnapshot) -> MatchResponse:
    return MatchResponse(**_match_fields(match))


def pending_match_response(view: PendingMatchView) -> PendingMatchResponse:
    return PendingMatchResponse(
        **_match_fields(view.match),
        winner_name=view.winner_name,
        loser_name=view.loser_name,
    )


def history_item_response(entry: MatchHistoryEntry) -> MatchHistoryItemResponse:
    return MatchHistoryItemResponse(**_match_fields(entry.match), result=entry.result.value)


def reward_response(reward: RewardSnapshot) -> RewardResponse:
    return RewardResponse(
        id=reward.reward_id,
        name=reward.name,
        description=reward.description,
        rarity=reward.rarity,
        stars=reward.stars,
        icon=reward.icon,
        is_rank_prize=reward.is_rank_prize,
    )


def assignment_response(
    assignment: RewardAssignmentSnapshot,
    *,
    now_utc: datetime,
) -> RewardAssignmentResponse:
    return RewardAssignmentResponse(
        id=assignment.assignment_id,
        player_id=assignment.player_id,
        reward=reward_response(assignment.reward),
        assigned_at=assignment.assigned_at,
        expires_at=assignment.expires_at,
        is_expired=assignment.is_expired(now_utc),
    )


def activity_response(activity: ActivitySnapshot) -> ActivityResponse:
    return ActivityResponse(
        id=activity.activity_id,
        type=activity.event_type.value,
        player_id=activity.player_id,
        player_display_name=activity.player_display_name,
        data=asdict(activity.payload),
        created_at=activity.created_at,
        reactions=[
            ReactionResponse(id=reaction.reaction_id, user_id=reaction.user_id, emoji=reaction.emoji)
            for reaction in activity.reactions
        ],
        reaction_counts=activity.reaction_counts,
    )
