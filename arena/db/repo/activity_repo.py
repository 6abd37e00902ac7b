from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from arena.db.models.activity_events import ActivityEvent
from arena.db.models.activity_reactions import ActivityReaction


class ActivityRepo:
    @staticmethod
    async def create(session: AsyncSession, *, event: ActivityEvent) -> ActivityEvent:
        session.add(event)
        await session.flush()
        return event

    @staticmethod
    async def get_by_id(session: AsyncSession, activity_id: int) -> ActivityEvent | None:
        return await session.get(ActivityEvent, activity_id)

    @staticmethod
    async def list_latest(session: AsyncSession, *, limit: int) -> list[ActivityEvent]:
        stmt = (
            select(ActivityEvent)
            .order_by(ActivityEvent.created_at.desc(), ActivityEvent.id.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_reactions(
        session: AsyncSession,
        activity_ids: Sequence[int],
    ) -> list[ActivityReaction]:
        ids = tuple({int(activity_id) for activity_id in activity_ids})
        if not ids:
            return []
        stmt = (
            select(ActivityReaction)
            .where(ActivityReaction.activity_id.in_(ids))
            .order_by(ActivityReaction.created_at.asc(), ActivityReaction.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def delete_reaction(
        session: AsyncSession,
        *,
        activity_id: int,
        user_id: str,
        emoji: str,
    ) -> int:
        stmt = delete(ActivityReaction).where(
            ActivityReaction.activity_id == activity_id,
            ActivityReaction.user_id == user_id,
            ActivityReaction.emoji == emoji,
        )
        result = await session.execute(stmt)
        return int(result.rowcount or 0)

    @staticmethod
    async def create_reaction(session: AsyncSession, *, reaction: ActivityReaction) -> ActivityReaction:
        session.add(reaction)
        await session.flush()
        return reaction

    @staticmethod
    async def delete_all(session: AsyncSession) -> int:
        await session.execute(delete(ActivityReaction))
        result = await session.execute(delete(ActivityEvent))
        return int(result.rowcount or 0)
