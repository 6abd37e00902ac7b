from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from arena.db.models.base import BigIntPK, Base


class Match(Base):
    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending','approved','rejected')",
            name="status",
        ),
        CheckConstraint(
            "winner_account_id <> loser_account_id OR winner_zone_id <> loser_zone_id",
            name="distinct_participants",
        ),
        Index("idx_matches_status_created", "status", "created_at"),
        Index("idx_matches_winner_ref", "winner_account_id", "winner_zone_id"),
        Index("idx_matches_loser_ref", "loser_account_id", "loser_zone_id"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    winner_account_id: Mapped[str] = mapped_column(String(64), nullable=False)
    winner_zone_id: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    loser_account_id: Mapped[str] = mapped_column(String(64), nullable=False)
    loser_zone_id: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    winner_hero: Mapped[str | None] = mapped_column(String(64), nullable=True)
    loser_hero: Mapped[str | None] = mapped_column(String(64), nullable=True)
    proof_ref: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    decided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
