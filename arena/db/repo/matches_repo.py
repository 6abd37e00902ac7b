from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from arena.db.models.matches import Match


class MatchesRepo:
    @staticmethod
    async def create(session: AsyncSession, *, match: Match) -> Match:
        session.add(match)
        await session.flush()
        return match

    @staticmethod
    async def get_by_id(session: AsyncSession, match_id: int) -> Match | None:
        stmt = select(Match).where(Match.id == match_id).execution_options(populate_existing=True)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def transition_status(
        session: AsyncSession,
        *,
        match_id: int,
        from_status: str,
        to_status: str,
        decided_at: datetime,
    ) -> bool:
        """Compare-and-set on status; False when the row no longer holds ``from_status``."""
        stmt = (
            update(Match)
            .where(Match.id == match_id, Match.status == from_status)
            .values(status=to_status, decided_at=decided_at)
            .execution_options(synchronize_session="fetch")
        )
        result = await session.execute(stmt)
        return bool(result.rowcount)

    @staticmethod
    async def list_by_status(session: AsyncSession, *, status: str) -> list[Match]:
        stmt = (
            select(Match)
            .where(Match.status == status)
            .order_by(Match.created_at.desc(), Match.id.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_for_ref(
        session: AsyncSession,
        *,
        account_id: str,
        zone_id: str,
        status: str,
    ) -> list[Match]:
        stmt = (
            select(Match)
            .where(
                Match.status == status,
                or_(
                    and_(Match.winner_account_id == account_id, Match.winner_zone_id == zone_id),
                    and_(Match.loser_account_id == account_id, Match.loser_zone_id == zone_id),
                ),
            )
            .order_by(Match.created_at.desc(), Match.id.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
