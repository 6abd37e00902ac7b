from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from arena.db.models.base import BigIntPK, Base


class ActivityReaction(Base):
    __tablename__ = "activity_reactions"
    __table_args__ = (
        Index("idx_activity_reactions_triple", "activity_id", "user_id", "emoji"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    activity_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("activity_events.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    emoji: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
