from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, Index, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from arena.db.models.base import BigIntPK, Base


class Reward(Base):
    __tablename__ = "rewards"
    __table_args__ = (
        CheckConstraint(
            "rarity IN ('rare','epic','legendary','mythic')",
            name="rarity",
        ),
        CheckConstraint("stars BETWEEN 1 AND 7", name="stars_range"),
        Index("idx_rewards_name", "name"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    rarity: Mapped[str] = mapped_column(String(16), nullable=False)
    stars: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=1)
    icon: Mapped[str] = mapped_column(Text, nullable=False)
    is_rank_prize: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
