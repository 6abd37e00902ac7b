from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from arena.db.models.base import BigIntPK, Base


class RewardAssignment(Base):
    __tablename__ = "reward_assignments"
    __table_args__ = (
        CheckConstraint(
            "expires_at IS NULL OR expires_at >= assigned_at",
            name="expires_after_assigned",
        ),
        Index("idx_reward_assignments_player", "player_id", "assigned_at"),
        Index("idx_reward_assignments_reward", "reward_id"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    player_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("players.id"), nullable=False)
    reward_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("rewards.id", ondelete="CASCADE"),
        nullable=False,
    )
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
