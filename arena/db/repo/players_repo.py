from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from arena.db.models.players import Player


class PlayersRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, player_id: int) -> Player | None:
        return await session.get(Player, player_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, player_id: int) -> Player | None:
        stmt = (
            select(Player)
            .where(Player.id == player_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_account_zone(
        session: AsyncSession,
        *,
        account_id: str,
        zone_id: str,
    ) -> Player | None:
        stmt = select(Player).where(Player.account_id == account_id, Player.zone_id == zone_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_account_zone_for_update(
        session: AsyncSession,
        *,
        account_id: str,
        zone_id: str,
    ) -> Player | None:
        stmt = (
            select(Player)
            .where(Player.account_id == account_id, Player.zone_id == zone_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_by_standing(session: AsyncSession, *, limit: int | None = None) -> list[Player]:
        stmt = select(Player).order_by(Player.points.desc(), Player.id.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_by_refs(
        session: AsyncSession,
        refs: set[tuple[str, str]],
    ) -> dict[tuple[str, str], Player]:
        if not refs:
            return {}
        account_ids = {account_id for account_id, _ in refs}
        stmt = select(Player).where(Player.account_id.in_(account_ids))
        result = await session.execute(stmt)
        return {
            (player.account_id, player.zone_id): player
            for player in result.scalars().all()
            if (player.account_id, player.zone_id) in refs
        }

    @staticmethod
    async def search_by_display_name(session: AsyncSession, query: str, *, limit: int) -> list[Player]:
        pattern = f"%{query.lower()}%"
        stmt = (
            select(Player)
            .where(func.lower(Player.display_name).like(pattern))
            .order_by(Player.points.desc(), Player.id.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        account_id: str,
        zone_id: str,
        display_name: str,
        points: int,
        rank_tier: str,
        now_utc: datetime,
        bio: str | None = None,
        main_hero: str | None = None,
        avatar_url: str | None = None,
        socials: dict[str, str] | None = None,
    ) -> Player:
        player = Player(
            account_id=account_id,
            zone_id=zone_id,
            display_name=display_name,
            points=points,
            wins=0,
            losses=0,
            win_streak=0,
            rank_tier=rank_tier,
            is_banned=False,
            bio=bio,
            main_hero=main_hero,
            avatar_url=avatar_url,
            socials=socials or {},
            created_at=now_utc,
            updated_at=now_utc,
        )
        session.add(player)
        await session.flush()
        return player
