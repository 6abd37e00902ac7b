from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from arena.db.models.rewards import Reward


class RewardsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, reward_id: int) -> Reward | None:
        return await session.get(Reward, reward_id)

    @staticmethod
    async def get_by_name(session: AsyncSession, name: str) -> Reward | None:
        stmt = select(Reward).where(Reward.name == name).order_by(Reward.id.asc()).limit(1)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_all(session: AsyncSession) -> list[Reward]:
        stmt = select(Reward).order_by(Reward.stars.desc(), Reward.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(session: AsyncSession, *, reward: Reward) -> Reward:
        session.add(reward)
        await session.flush()
        return reward

    @staticmethod
    async def delete(session: AsyncSession, reward: Reward) -> None:
        await session.delete(reward)
        await session.flush()
