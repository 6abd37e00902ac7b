from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import async_sessionmaker

from arena.db.models.activity_events import ActivityEvent
from arena.db.models.players import Player
from arena.ledger.registration import register_player
from arena.ledger.service import PlayerLedger
from arena.ledger.types import PlayerRef, PlayerSnapshot
from arena.matches.service import MatchAdjudication
from arena.rewards.service import RewardService
from arena.rewards.types import RewardSnapshot

UTC = timezone.utc
NOW = datetime(2026, 3, 10, 15, 0, tzinfo=UTC)


async def _create_player(
    session_factory: async_sessionmaker,
    account_id: str,
    *,
    zone_id: str = "1001",
    display_name: str | None = None,
    points: int | None = None,
    now_utc: datetime = NOW,
) -> PlayerSnapshot:
    async with session_factory.begin() as session:
        snapshot = await register_player(
            session,
            ref=PlayerRef(account_id=account_id, zone_id=zone_id),
            display_name=display_name or f"Player {account_id}",
            now_utc=now_utc,
        )
        if points is not None:
            player = await PlayerLedger.update_player(
                session,
                player_id=snapshot.player_id,
                changes={"points": points},
                now_utc=now_utc,
            )
            snapshot = PlayerLedger.snapshot(player)
    return snapshot


async def _create_reward(
    session_factory: async_sessionmaker,
    name: str = "Coroa do Campeão",
    *,
    rarity: str = "legendary",
    stars: int = 5,
) -> RewardSnapshot:
    async with session_factory.begin() as session:
        return await RewardService.create_reward(
            session,
            name=name,
            description="Prêmio de temporada",
            rarity=rarity,
            icon="crown",
            stars=stars,
            is_rank_prize=True,
        )


async def _report(
    session_factory: async_sessionmaker,
    winner: PlayerSnapshot,
    loser: PlayerSnapshot,
    *,
    now_utc: datetime = NOW,
) -> int:
    async with session_factory.begin() as session:
        match = await MatchAdjudication.report_match(
            session,
            winner=winner.ref,
            loser=loser.ref,
            now_utc=now_utc,
            proof_ref="proof://match.png",
            winner_hero="Ling",
        )
    return match.match_id


async def _get_player(session_factory: async_sessionmaker, player_id: int) -> Player:
    async with session_factory() as session:
        player = await session.get(Player, player_id)
        assert player is not None
        return player


async def _event_types(session_factory: async_sessionmaker) -> list[str]:
    async with session_factory() as session:
        result = await session.execute(select(ActivityEvent.event_type).order_by(ActivityEvent.id.asc()))
        return list(result.scalars().all())


async def _set_stored_tier(session_factory: async_sessionmaker, player_id: int, rank_tier: str) -> None:
    async with session_factory.begin() as session:
        await session.execute(update(Player).where(Player.id == player_id).values(rank_tier=rank_tier))
