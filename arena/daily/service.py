from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from arena.activity.payloads import DailyClaimPayload, RankUpPayload
from arena.activity.service import ActivityLog
from arena.activity.types import ActivityEventType
from arena.core.time import local_date
from arena.daily.constants import DEFAULT_DAILY_CLAIM_BONUS
from arena.daily.errors import AlreadyClaimedTodayError
from arena.daily.rules import claimed_on_same_day
from arena.daily.types import DailyClaimResult
from arena.db.repo.players_repo import PlayersRepo
from arena.ledger.errors import PlayerNotFoundError
from arena.ledger.service import PlayerLedger

logger = structlog.get_logger(__name__)


class DailyClaimService:
    @staticmethod
    async def claim_daily(
        session: AsyncSession,
        *,
        player_id: int,
        now_utc: datetime,
        tz_name: str,
        bonus: int = DEFAULT_DAILY_CLAIM_BONUS,
    ) -> DailyClaimResult:
        player = await PlayersRepo.get_by_id_for_update(session, player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)

        claim_day = local_date(now_utc, tz_name)
        if claimed_on_same_day(player.last_daily_claim_at, now_utc=now_utc, tz_name=tz_name):
            raise AlreadyClaimedTodayError(player_id, claim_day)

        previous_tier = player.rank_tier
        # The version guard turns a concurrent claim on engines without row locks into a conflict.
        await PlayerLedger.update_player(
            session,
            player_id=player_id,
            changes={
                "points": player.points + bonus,
                "last_daily_claim_at": now_utc,
            },
            now_utc=now_utc,
            expected_version=player.version,
        )

        await ActivityLog.append(
            session,
            event_type=ActivityEventType.DAILY_CLAIM,
            player_id=player.id,
            display_name=player.display_name,
            payload=DailyClaimPayload(points=bonus),
            now_utc=now_utc,
        )
        ranked_up = player.rank_tier != previous_tier
        if ranked_up:
            await ActivityLog.append(
                session,
                event_type=ActivityEventType.RANK_UP,
                player_id=player.id,
                display_name=player.display_name,
                payload=RankUpPayload(new_rank=player.rank_tier, previous_rank=previous_tier),
                now_utc=now_utc,
            )

        logger.info(
            "daily_claim_granted",
            player_id=player_id,
            points_granted=bonus,
            points_after=player.points,
            claim_local_date=claim_day.isoformat(),
            ranked_up=ranked_up,
        )
        return DailyClaimResult(
            player_id=player_id,
            points_granted=bonus,
            points_after=player.points,
            rank_tier=player.rank_tier,
            ranked_up=ranked_up,
            claimed_at=now_utc,
            claim_local_date=claim_day,
        )
