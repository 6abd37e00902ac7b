from __future__ import annotations

from datetime import datetime, timedelta, timezone

from arena.rewards.types import RewardAssignmentSnapshot, RewardSnapshot

UTC = timezone.utc


def assignment(*, expires_at: datetime | None) -> RewardAssignmentSnapshot:
    return RewardAssignmentSnapshot(
        assignment_id=1,
        player_id=1,
        reward=RewardSnapshot(
            reward_id=1,
            name="Coroa",
            description="",
            rarity="legendary",
            stars=5,
            icon="crown",
            is_rank_prize=True,
        ),
        assigned_at=datetime(2026, 3, 1, tzinfo=UTC),
        expires_at=expires_at,
    )


def test_assignment_without_expiry_never_expires() -> None:
    assert assignment(expires_at=None).is_expired(datetime(2030, 1, 1, tzinfo=UTC)) is False


def test_assignment_expires_at_boundary() -> None:
    expires_at = datetime(2026, 3, 8, tzinfo=UTC)
    item = assignment(expires_at=expires_at)

    assert item.is_expired(expires_at - timedelta(seconds=1)) is False
    assert item.is_expired(expires_at) is True
