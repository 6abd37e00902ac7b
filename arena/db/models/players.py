from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from arena.db.models.base import BigIntPK, Base, JSONPayload


class Player(Base):
    __tablename__ = "players"
    __table_args__ = (
        UniqueConstraint("account_id", "zone_id", name="uq_players_account_zone"),
        CheckConstraint("points >= 0", name="points_non_negative"),
        CheckConstraint("wins >= 0", name="wins_non_negative"),
        CheckConstraint("losses >= 0", name="losses_non_negative"),
        CheckConstraint("win_streak >= 0", name="win_streak_non_negative"),
        Index("idx_players_points", "points"),
        Index("idx_players_display_name", "display_name"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    account_id: Mapped[str] = mapped_column(String(64), nullable=False)
    zone_id: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    display_name: Mapped[str] = mapped_column(Text, nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    win_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rank_tier: Mapped[str] = mapped_column(String(32), nullable=False)
    is_banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_daily_claim_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    main_hero: Mapped[str | None] = mapped_column(String(64), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    socials: Mapped[dict[str, str]] = mapped_column(JSONPayload, nullable=False, default=dict)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Every flush issues UPDATE ... WHERE version = :loaded and bumps it.
    __mapper_args__ = {"version_id_col": version}
