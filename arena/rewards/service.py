from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from arena.activity.payloads import RewardEarnedPayload
from arena.activity.service import ActivityLog
from arena.activity.types import ActivityEventType
from arena.core.errors import InvalidReferenceError
from arena.core.time import ensure_utc
from arena.db.models.reward_assignments import RewardAssignment
from arena.db.models.rewards import Reward
from arena.db.repo.players_repo import PlayersRepo
from arena.db.repo.reward_assignments_repo import RewardAssignmentsRepo
from arena.db.repo.rewards_repo import RewardsRepo
from arena.ledger.errors import PlayerNotFoundError
from arena.rewards.constants import (
    RANK_TARGET_SIZES,
    REWARD_MAX_STARS,
    REWARD_MIN_STARS,
    REWARD_RARITIES,
)
from arena.rewards.errors import InvalidExpiryError, InvalidRewardError, RewardNotFoundError
from arena.rewards.types import RewardAssignmentSnapshot, RewardBatchResult, RewardSnapshot

logger = structlog.get_logger(__name__)

REWARD_EDITABLE_FIELDS = frozenset({"name", "description", "rarity", "stars", "icon", "is_rank_prize"})


def _validate_reward_fields(values: Mapping[str, Any]) -> None:
    unknown = set(values) - REWARD_EDITABLE_FIELDS
    if unknown:
        raise InvalidRewardError(f"unsupported reward fields: {', '.join(sorted(unknown))}")
    if "rarity" in values and values["rarity"] not in REWARD_RARITIES:
        raise InvalidRewardError(f"rarity must be one of {', '.join(REWARD_RARITIES)}")
    if "stars" in values:
        stars = values["stars"]
        if isinstance(stars, bool) or not isinstance(stars, int):
            raise InvalidRewardError("stars must be an integer")
        if not REWARD_MIN_STARS <= stars <= REWARD_MAX_STARS:
            raise InvalidRewardError(f"stars must be between {REWARD_MIN_STARS} and {REWARD_MAX_STARS}")
    for field in ("name", "icon"):
        if field in values and not str(values[field]).strip():
            raise InvalidRewardError(f"{field} must not be blank")


class RewardService:
    @staticmethod
    def _reward_snapshot(reward: Reward) -> RewardSnapshot:
        return RewardSnapshot(
            reward_id=reward.id,
            name=reward.name,
            description=reward.description,
            rarity=reward.rarity,
            stars=reward.stars,
            icon=reward.icon,
            is_rank_prize=reward.is_rank_prize,
        )

    @staticmethod
    def _assignment_snapshot(assignment: RewardAssignment, reward: Reward) -> RewardAssignmentSnapshot:
        return RewardAssignmentSnapshot(
            assignment_id=assignment.id,
            player_id=assignment.player_id,
            reward=RewardService._reward_snapshot(reward),
            assigned_at=ensure_utc(assignment.assigned_at),
            expires_at=ensure_utc(assignment.expires_at) if assignment.expires_at is not None else None,
        )

    @staticmethod
    async def _require_reward(session: AsyncSession, reward_id: int) -> Reward:
        reward = await RewardsRepo.get_by_id(session, reward_id)
        if reward is None:
            raise RewardNotFoundError(reward_id)
        return reward

    @staticmethod
    async def list_rewards(session: AsyncSession) -> list[RewardSnapshot]:
        return [RewardService._reward_snapshot(reward) for reward in await RewardsRepo.list_all(session)]

    @staticmethod
    async def create_reward(
        session: AsyncSession,
        *,
        name: str,
        description: str,
        rarity: str,
        icon: str,
        stars: int = 1,
        is_rank_prize: bool = False,
    ) -> RewardSnapshot:
        values = {
            "name": name.strip(),
            "description": description,
            "rarity": rarity,
            "stars": stars,
            "icon": icon,
            "is_rank_prize": is_rank_prize,
        }
        _validate_reward_fields(values)
        reward = await RewardsRepo.create(session, reward=Reward(**values))
        logger.info("reward_created", reward_id=reward.id, rarity=rarity)
        return RewardService._reward_snapshot(reward)

    @staticmethod
    async def update_reward(
        session: AsyncSession,
        *,
        reward_id: int,
        changes: Mapping[str, Any],
    ) -> RewardSnapshot:
        _validate_reward_fields(changes)
        reward = await RewardService._require_reward(session, reward_id)
        for field, value in changes.items():
            setattr(reward, field, value)
        await session.flush()
        return RewardService._reward_snapshot(reward)

    @staticmethod
    async def delete_reward(session: AsyncSession, *, reward_id: int) -> None:
        reward = await RewardService._require_reward(session, reward_id)
        revoked = await RewardAssignmentsRepo.delete_for_reward(session, reward_id=reward_id)
        await RewardsRepo.delete(session, reward)
        logger.info("reward_deleted", reward_id=reward_id, revoked_assignments=revoked)

    @staticmethod
    async def assign_reward(
        session: AsyncSession,
        *,
        player_id: int,
        reward_id: int,
        now_utc: datetime,
        expires_at: datetime | None = None,
        allow_duplicates: bool = True,
    ) -> RewardAssignmentSnapshot:
        """Grants a catalog reward to a player and records a ``reward_earned`` event.

        Repeated grants of the same reward insert new rows unless
        ``allow_duplicates`` is False, in which case a still-active assignment
        is returned unchanged and nothing is recorded.
        """
        player = await PlayersRepo.get_by_id(session, player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        reward = await RewardService._require_reward(session, reward_id)
        if expires_at is not None and ensure_utc(expires_at) < ensure_utc(now_utc):
            raise InvalidExpiryError("expires_at must not precede the assignment time")

        if not allow_duplicates:
            existing = await RewardAssignmentsRepo.get_active(
                session,
                player_id=player_id,
                reward_id=reward_id,
                now_utc=now_utc,
            )
            if existing is not None:
                return RewardService._assignment_snapshot(existing, reward)

        assignment = await RewardAssignmentsRepo.create(
            session,
            assignment=RewardAssignment(
                player_id=player_id,
                reward_id=reward_id,
                assigned_at=now_utc,
                expires_at=expires_at,
            ),
        )
        await ActivityLog.append(
            session,
            event_type=ActivityEventType.REWARD_EARNED,
            player_id=player.id,
            display_name=player.display_name,
            payload=RewardEarnedPayload(
                reward_id=reward.id,
                reward_name=reward.name,
                reward_icon=reward.icon,
                rarity=reward.rarity,
                expires_at=ensure_utc(expires_at).isoformat() if expires_at is not None else None,
            ),
            now_utc=now_utc,
        )
        logger.info(
            "reward_assigned",
            player_id=player_id,
            reward_id=reward_id,
            assignment_id=assignment.id,
            expires_at=expires_at,
        )
        return RewardService._assignment_snapshot(assignment, reward)

    @staticmethod
    async def batch_assign_by_rank(
        session: AsyncSession,
        *,
        rank_target: str,
        reward_id: int,
        now_utc: datetime,
        expires_days: int | None = None,
        allow_duplicates: bool = True,
    ) -> RewardBatchResult:
        target_size = RANK_TARGET_SIZES.get(rank_target)
        if target_size is None:
            raise InvalidReferenceError(f"unknown rank target: {rank_target}")
        if expires_days is not None and expires_days < 0:
            raise InvalidExpiryError("expires_days must not be negative")

        # Reward existence is checked before any row is written.
        await RewardService._require_reward(session, reward_id)

        players = await PlayersRepo.list_by_standing(session, limit=target_size)
        if not players:
            raise InvalidReferenceError(f"{rank_target} resolves to no player")

        expires_at = now_utc + timedelta(days=expires_days) if expires_days is not None else None
        assignments = [
            await RewardService.assign_reward(
                session,
                player_id=player.id,
                reward_id=reward_id,
                now_utc=now_utc,
                expires_at=expires_at,
                allow_duplicates=allow_duplicates,
            )
            for player in players
        ]
        logger.info(
            "reward_batch_assigned",
            rank_target=rank_target,
            reward_id=reward_id,
            players_total=len(assignments),
        )
        return RewardBatchResult(
            rank_target=rank_target,
            reward_id=reward_id,
            assignments=tuple(assignments),
        )

    @staticmethod
    async def list_assignments_for_player(
        session: AsyncSession,
        *,
        player_id: int,
    ) -> list[RewardAssignmentSnapshot]:
        if await PlayersRepo.get_by_id(session, player_id) is None:
            raise PlayerNotFoundError(player_id)
        rows = await RewardAssignmentsRepo.list_for_player(session, player_id=player_id)
        return [RewardService._assignment_snapshot(assignment, reward) for assignment, reward in rows]
