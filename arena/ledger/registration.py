from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from arena.activity.payloads import NewPlayerPayload
from arena.activity.service import ActivityLog
from arena.activity.types import ActivityEventType
from arena.db.repo.players_repo import PlayersRepo
from arena.db.repo.rewards_repo import RewardsRepo
from arena.ledger.constants import STARTING_POINTS
from arena.ledger.errors import PlayerAlreadyRegisteredError
from arena.ledger.service import PlayerLedger
from arena.ledger.tiers import rank_tier_for
from arena.ledger.types import PlayerRef, PlayerSnapshot
from arena.rewards.service import RewardService

logger = structlog.get_logger(__name__)


async def register_player(
    session: AsyncSession,
    *,
    ref: PlayerRef,
    display_name: str,
    now_utc: datetime,
    welcome_reward_name: str | None = None,
    bio: str | None = None,
    main_hero: str | None = None,
    avatar_url: str | None = None,
    socials: dict[str, str] | None = None,
) -> PlayerSnapshot:
    name = display_name.strip()
    if not ref.account_id.strip() or not name:
        raise ValueError("account_id and display_name are required")

    existing = await PlayersRepo.get_by_account_zone(
        session,
        account_id=ref.account_id,
        zone_id=ref.zone_id,
    )
    if existing is not None:
        raise PlayerAlreadyRegisteredError(str(ref))

    player = await PlayersRepo.create(
        session,
        account_id=ref.account_id,
        zone_id=ref.zone_id,
        display_name=name,
        points=STARTING_POINTS,
        rank_tier=rank_tier_for(STARTING_POINTS),
        now_utc=now_utc,
        bio=bio,
        main_hero=main_hero,
        avatar_url=avatar_url,
        socials=socials,
    )
    await ActivityLog.append(
        session,
        event_type=ActivityEventType.NEW_PLAYER,
        player_id=player.id,
        display_name=player.display_name,
        payload=NewPlayerPayload(account_id=ref.account_id, zone_id=ref.zone_id),
        now_utc=now_utc,
    )

    if welcome_reward_name:
        welcome_reward = await RewardsRepo.get_by_name(session, welcome_reward_name)
        if welcome_reward is None:
            logger.warning("welcome_reward_missing", reward_name=welcome_reward_name)
        else:
            await RewardService.assign_reward(
                session,
                player_id=player.id,
                reward_id=welcome_reward.id,
                now_utc=now_utc,
            )

    logger.info("player_registered", player_id=player.id, ref=str(ref))
    return PlayerLedger.snapshot(player)
