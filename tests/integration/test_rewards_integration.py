from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from arena.core.errors import InvalidReferenceError
from arena.db.models.reward_assignments import RewardAssignment
from arena.ledger.errors import PlayerNotFoundError
from arena.rewards.errors import InvalidExpiryError, InvalidRewardError, RewardNotFoundError
from arena.rewards.service import RewardService
from tests.integration.arena_fixtures import NOW, _create_player, _create_reward, _event_types


async def _assignment_count(session_factory) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(RewardAssignment))


@pytest.mark.asyncio
async def test_catalog_create_update_and_delete(session_factory) -> None:
    reward = await _create_reward(session_factory, "Coroa", rarity="epic", stars=3)

    async with session_factory.begin() as session:
        updated = await RewardService.update_reward(
            session,
            reward_id=reward.reward_id,
            changes={"stars": 6, "description": "Top da temporada"},
        )
    assert (updated.stars, updated.description, updated.rarity) == (6, "Top da temporada", "epic")

    async with session_factory.begin() as session:
        await RewardService.delete_reward(session, reward_id=reward.reward_id)
        assert await RewardService.list_rewards(session) == []

    with pytest.raises(RewardNotFoundError):
        async with session_factory.begin() as session:
            await RewardService.delete_reward(session, reward_id=reward.reward_id)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes",
    [{"stars": 0}, {"stars": 8}, {"rarity": "common"}, {"name": "  "}, {"owner": "x"}],
)
async def test_invalid_reward_changes_are_refused(session_factory, changes) -> None:
    reward = await _create_reward(session_factory)

    with pytest.raises(InvalidRewardError):
        async with session_factory.begin() as session:
            await RewardService.update_reward(session, reward_id=reward.reward_id, changes=changes)


@pytest.mark.asyncio
async def test_assign_reward_records_event_and_expiry(session_factory) -> None:
    player = await _create_player(session_factory, "100")
    reward = await _create_reward(session_factory)
    expires_at = NOW + timedelta(days=7)

    async with session_factory.begin() as session:
        assignment = await RewardService.assign_reward(
            session,
            player_id=player.player_id,
            reward_id=reward.reward_id,
            now_utc=NOW,
            expires_at=expires_at,
        )

    assert assignment.expires_at == expires_at
    assert assignment.is_expired(NOW) is False
    assert assignment.is_expired(expires_at) is True
    assert (await _event_types(session_factory))[-1] == "reward_earned"


@pytest.mark.asyncio
async def test_expiry_before_assignment_is_refused(session_factory) -> None:
    player = await _create_player(session_factory, "100")
    reward = await _create_reward(session_factory)

    with pytest.raises(InvalidExpiryError):
        async with session_factory.begin() as session:
            await RewardService.assign_reward(
                session,
                player_id=player.player_id,
                reward_id=reward.reward_id,
                now_utc=NOW,
                expires_at=NOW - timedelta(seconds=1),
            )
    assert await _assignment_count(session_factory) == 0


@pytest.mark.asyncio
async def test_duplicate_grants_follow_the_flag(session_factory) -> None:
    player = await _create_player(session_factory, "100")
    reward = await _create_reward(session_factory)

    async with session_factory.begin() as session:
        for _ in range(2):
            await RewardService.assign_reward(
                session,
                player_id=player.player_id,
                reward_id=reward.reward_id,
                now_utc=NOW,
            )
    assert await _assignment_count(session_factory) == 2

    async with session_factory.begin() as session:
        await RewardService.assign_reward(
            session,
            player_id=player.player_id,
            reward_id=reward.reward_id,
            now_utc=NOW,
            allow_duplicates=False,
        )
    assert await _assignment_count(session_factory) == 2


@pytest.mark.asyncio
async def test_assign_requires_existing_player_and_reward(session_factory) -> None:
    player = await _create_player(session_factory, "100")
    reward = await _create_reward(session_factory)

    with pytest.raises(PlayerNotFoundError):
        async with session_factory.begin() as session:
            await RewardService.assign_reward(session, player_id=999, reward_id=reward.reward_id, now_utc=NOW)
    with pytest.raises(RewardNotFoundError):
        async with session_factory.begin() as session:
            await RewardService.assign_reward(session, player_id=player.player_id, reward_id=999, now_utc=NOW)


@pytest.mark.asyncio
async def test_batch_top3_with_two_players_assigns_both(session_factory) -> None:
    first = await _create_player(session_factory, "100", points=500)
    second = await _create_player(session_factory, "200", points=300)
    reward = await _create_reward(session_factory)

    async with session_factory.begin() as session:
        result = await RewardService.batch_assign_by_rank(
            session,
            rank_target="top3",
            reward_id=reward.reward_id,
            now_utc=NOW,
            expires_days=30,
        )

    assert [item.player_id for item in result.assignments] == [first.player_id, second.player_id]
    assert all(item.expires_at == NOW + timedelta(days=30) for item in result.assignments)
    assert (await _event_types(session_factory)).count("reward_earned") == 2


@pytest.mark.asyncio
async def test_batch_top1_picks_the_leader(session_factory) -> None:
    await _create_player(session_factory, "100", points=200)
    leader = await _create_player(session_factory, "200", points=800)
    reward = await _create_reward(session_factory)

    async with session_factory.begin() as session:
        result = await RewardService.batch_assign_by_rank(
            session,
            rank_target="top1",
            reward_id=reward.reward_id,
            now_utc=NOW,
        )

    assert [item.player_id for item in result.assignments] == [leader.player_id]
    assert result.assignments[0].expires_at is None


@pytest.mark.asyncio
async def test_batch_with_unknown_reward_writes_nothing(session_factory) -> None:
    await _create_player(session_factory, "100")

    with pytest.raises(RewardNotFoundError):
        async with session_factory.begin() as session:
            await RewardService.batch_assign_by_rank(session, rank_target="top3", reward_id=404, now_utc=NOW)

    assert await _assignment_count(session_factory) == 0
    assert "reward_earned" not in await _event_types(session_factory)


@pytest.mark.asyncio
async def test_batch_rejects_unknown_target_and_empty_standings(session_factory) -> None:
    reward = await _create_reward(session_factory)

    with pytest.raises(InvalidReferenceError):
        async with session_factory.begin() as session:
            await RewardService.batch_assign_by_rank(
                session,
                rank_target="top1",
                reward_id=reward.reward_id,
                now_utc=NOW,
            )
    with pytest.raises(InvalidReferenceError):
        async with session_factory.begin() as session:
            await RewardService.batch_assign_by_rank(
                session,
                rank_target="top5",
                reward_id=reward.reward_id,
                now_utc=NOW,
            )


@pytest.mark.asyncio
async def test_deleting_a_reward_revokes_its_assignments(session_factory) -> None:
    player = await _create_player(session_factory, "100")
    reward = await _create_reward(session_factory)
    async with session_factory.begin() as session:
        await RewardService.assign_reward(
            session,
            player_id=player.player_id,
            reward_id=reward.reward_id,
            now_utc=NOW,
        )

    async with session_factory.begin() as session:
        await RewardService.delete_reward(session, reward_id=reward.reward_id)
        assert await RewardService.list_assignments_for_player(session, player_id=player.player_id) == []
