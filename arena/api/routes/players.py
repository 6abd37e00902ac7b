from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from arena.api.internal_auth import require_internal_token
from arena.core.config import get_settings
from arena.core.errors import ArenaError
from arena.daily.service import DailyClaimService
from arena.db.session import SessionLocal
from arena.ledger.registration import register_player
from arena.ledger.service import PlayerLedger
from arena.ledger.types import PlayerRef
from arena.matches.service import MatchAdjudication
from arena.rewards.service import RewardService

from .errors import as_http_exception
from .models import (
    ArenaStatsResponse,
    DailyClaimResponse,
    PlayerProfileResponse,
    PlayerRegisterRequest,
    PlayerResponse,
    PlayerUpdateRequest,
    RewardAssignmentResponse,
    RewardAssignRequest,
)
from .serializers import assignment_response, history_item_response, player_response

router = APIRouter(tags=["players"])

_NON_NULLABLE_FIELDS = ("display_name", "is_banned", "points", "socials")


@router.get("/players", response_model=list[PlayerResponse])
async def list_players() -> list[PlayerResponse]:
    async with SessionLocal() as session:
        players = await PlayerLedger.list_all(session)
    return [player_response(player) for player in players]


@router.get("/players/search", response_model=list[PlayerResponse])
async def search_players(q: str = Query(min_length=1, max_length=64)) -> list[PlayerResponse]:
    async with SessionLocal() as session:
        players = await PlayerLedger.search(session, q)
    return [player_response(player) for player in players]


@router.get("/players/{account_id}/profile", response_model=PlayerProfileResponse)
async def get_player_profile(
    account_id: str,
    zone_id: str = Query(default="", max_length=32),
) -> PlayerProfileResponse:
    ref = PlayerRef(account_id=account_id, zone_id=zone_id)
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal() as session:
            player = await PlayerLedger.get_by_account_zone(session, ref)
            history = await MatchAdjudication.get_match_history(session, ref)
            stats = await MatchAdjudication.get_arena_stats(session, ref)
            rewards = await RewardService.list_assignments_for_player(session, player_id=player.player_id)
    except ArenaError as exc:
        raise as_http_exception(exc) from exc

    return PlayerProfileResponse(
        player=player_response(player),
        history=[history_item_response(entry) for entry in history],
        arena_stats=ArenaStatsResponse(
            total_matches=stats.total_matches,
            wins=stats.wins,
            losses=stats.losses,
            win_rate=stats.win_rate,
        ),
        rewards=[assignment_response(assignment, now_utc=now_utc) for assignment in rewards],
    )


@router.post("/players", response_model=PlayerResponse, status_code=201)
async def create_player(payload: PlayerRegisterRequest) -> PlayerResponse:
    settings = get_settings()
    try:
        async with SessionLocal.begin() as session:
            player = await register_player(
                session,
                ref=PlayerRef(account_id=payload.account_id, zone_id=payload.zone_id),
                display_name=payload.display_name,
                now_utc=datetime.now(timezone.utc),
                welcome_reward_name=settings.welcome_reward_name,
                bio=payload.bio,
                main_hero=payload.main_hero,
                avatar_url=payload.avatar_url,
                socials=payload.socials,
            )
    except (ArenaError, ValueError) as exc:
        raise as_http_exception(exc) from exc
    return player_response(player)


@router.post("/players/{player_id}/daily-claim", response_model=DailyClaimResponse)
async def claim_daily(player_id: int) -> DailyClaimResponse:
    settings = get_settings()
    try:
        async with SessionLocal.begin() as session:
            result = await DailyClaimService.claim_daily(
                session,
                player_id=player_id,
                now_utc=datetime.now(timezone.utc),
                tz_name=settings.arena_timezone,
                bonus=settings.daily_claim_bonus,
            )
    except ArenaError as exc:
        raise as_http_exception(exc) from exc

    return DailyClaimResponse(
        player_id=result.player_id,
        points_granted=result.points_granted,
        points_after=result.points_after,
        rank_tier=result.rank_tier,
        ranked_up=result.ranked_up,
        claimed_at=result.claimed_at,
        claim_local_date=result.claim_local_date,
    )


@router.patch(
    "/internal/players/{player_id}",
    response_model=PlayerResponse,
    dependencies=[Depends(require_internal_token)],
)
async def update_player(player_id: int, payload: PlayerUpdateRequest) -> PlayerResponse:
    changes = payload.model_dump(exclude_unset=True)
    for field in _NON_NULLABLE_FIELDS:
        if changes.get(field, ...) is None:
            changes.pop(field)
    try:
        async with SessionLocal.begin() as session:
            player = await PlayerLedger.update_player(
                session,
                player_id=player_id,
                changes=changes,
                now_utc=datetime.now(timezone.utc),
            )
            snapshot = PlayerLedger.snapshot(player)
    except (ArenaError, ValueError) as exc:
        raise as_http_exception(exc) from exc
    return player_response(snapshot)


@router.post(
    "/internal/players/{player_id}/rewards",
    response_model=RewardAssignmentResponse,
    status_code=201,
    dependencies=[Depends(require_internal_token)],
)
async def assign_reward(player_id: int, payload: RewardAssignRequest) -> RewardAssignmentResponse:
    settings = get_settings()
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            assignment = await RewardService.assign_reward(
                session,
                player_id=player_id,
                reward_id=payload.reward_id,
                now_utc=now_utc,
                expires_at=payload.expires_at,
                allow_duplicates=settings.reward_allow_duplicate_grants,
            )
    except ArenaError as exc:
        raise as_http_exception(exc) from exc
    return assignment_response(assignment, now_utc=now_utc)
