from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from arena.db.models.reward_assignments import RewardAssignment
from arena.db.models.rewards import Reward


class RewardAssignmentsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, assignment: RewardAssignment) -> RewardAssignment:
        session.add(assignment)
        await session.flush()
        return assignment

    @staticmethod
    async def get_active(
        session: AsyncSession,
        *,
        player_id: int,
        reward_id: int,
        now_utc: datetime,
    ) -> RewardAssignment | None:
        stmt = (
            select(RewardAssignment)
            .where(
                RewardAssignment.player_id == player_id,
                RewardAssignment.reward_id == reward_id,
                or_(RewardAssignment.expires_at.is_(None), RewardAssignment.expires_at > now_utc),
            )
            .order_by(RewardAssignment.assigned_at.desc(), RewardAssignment.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_player(
        session: AsyncSession,
        *,
        player_id: int,
    ) -> list[tuple[RewardAssignment, Reward]]:
        stmt = (
            select(RewardAssignment, Reward)
            .join(Reward, Reward.id == RewardAssignment.reward_id)
            .where(RewardAssignment.player_id == player_id)
            .order_by(RewardAssignment.assigned_at.desc(), RewardAssignment.id.desc())
        )
        result = await session.execute(stmt)
        return [(assignment, reward) for assignment, reward in result.all()]

    @staticmethod
    async def delete_for_reward(session: AsyncSession, *, reward_id: int) -> int:
        stmt = delete(RewardAssignment).where(RewardAssignment.reward_id == reward_id)
        result = await session.execute(stmt)
        return int(result.rowcount or 0)
