from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from arena.core.time import ensure_utc
from arena.db.models.players import Player
from arena.db.repo.players_repo import PlayersRepo
from arena.ledger.errors import PlayerNotFoundError, PlayerWriteConflictError
from arena.ledger.rules import normalize_player_changes
from arena.ledger.types import PlayerRef, PlayerSnapshot

logger = structlog.get_logger(__name__)

PLAYER_SEARCH_LIMIT = 25


class PlayerLedger:
    """Owns every write to player rows.

    All callers mutate players through ``update_player``; reads are plain
    accessors without locks.
    """

    @staticmethod
    def snapshot(player: Player) -> PlayerSnapshot:
        return PlayerSnapshot(
            player_id=player.id,
            account_id=player.account_id,
            zone_id=player.zone_id,
            display_name=player.display_name,
            points=player.points,
            wins=player.wins,
            losses=player.losses,
            win_streak=player.win_streak,
            rank_tier=player.rank_tier,
            is_banned=player.is_banned,
            last_daily_claim_at=(
                ensure_utc(player.last_daily_claim_at)
                if player.last_daily_claim_at is not None
                else None
            ),
            bio=player.bio,
            main_hero=player.main_hero,
            avatar_url=player.avatar_url,
            socials=dict(player.socials or {}),
            created_at=ensure_utc(player.created_at),
        )

    @staticmethod
    async def get_by_id(session: AsyncSession, player_id: int) -> PlayerSnapshot:
        player = await PlayersRepo.get_by_id(session, player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        return PlayerLedger.snapshot(player)

    @staticmethod
    async def get_by_account_zone(session: AsyncSession, ref: PlayerRef) -> PlayerSnapshot:
        player = await PlayersRepo.get_by_account_zone(
            session,
            account_id=ref.account_id,
            zone_id=ref.zone_id,
        )
        if player is None:
            raise PlayerNotFoundError(str(ref))
        return PlayerLedger.snapshot(player)

    @staticmethod
    async def list_all(session: AsyncSession) -> list[PlayerSnapshot]:
        return [PlayerLedger.snapshot(player) for player in await PlayersRepo.list_by_standing(session)]

    @staticmethod
    async def search(session: AsyncSession, query: str) -> list[PlayerSnapshot]:
        needle = query.strip()
        if not needle:
            return []
        players = await PlayersRepo.search_by_display_name(session, needle, limit=PLAYER_SEARCH_LIMIT)
        return [PlayerLedger.snapshot(player) for player in players]

    @staticmethod
    async def update_player(
        session: AsyncSession,
        *,
        player_id: int,
        changes: Mapping[str, Any],
        now_utc: datetime,
        expected_version: int | None = None,
    ) -> Player:
        """Applies a partial update to one player in a single UPDATE statement.

        When ``points`` changes, ``rank_tier`` is rewritten in the same statement.
        ``expected_version`` guards read-modify-write callers against a concurrent
        writer that slipped in between their read and this write.
        """
        values = normalize_player_changes(changes)

        player = await PlayersRepo.get_by_id_for_update(session, player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        if expected_version is not None and player.version != expected_version:
            raise PlayerWriteConflictError(player_id)

        for field, value in values.items():
            setattr(player, field, value)
        player.updated_at = now_utc

        try:
            await session.flush()
        except StaleDataError as exc:
            raise PlayerWriteConflictError(player_id) from exc

        logger.debug(
            "player_updated",
            player_id=player_id,
            fields=sorted(values),
            version=player.version,
        )
        return player
