from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from arena.db.models.matches import Match
from arena.ledger.constants import UNKNOWN_PLAYER_NAME
from arena.ledger.types import PlayerRef
from arena.matches import service as match_service
from arena.matches.errors import MatchAlreadyDecidedError, MatchNotFoundError, SelfMatchError
from arena.matches.service import MatchAdjudication
from arena.matches.types import MatchDecision, MatchResult
from tests.integration.arena_fixtures import (
    NOW,
    _create_player,
    _event_types,
    _get_player,
    _report,
    _set_stored_tier,
)


async def _decide(session_factory, match_id: int, decision: MatchDecision, *, minutes: int = 5):
    async with session_factory.begin() as session:
        return await MatchAdjudication.decide(
            session,
            match_id=match_id,
            decision=decision,
            now_utc=NOW + timedelta(minutes=minutes),
        )


@pytest.mark.asyncio
async def test_approve_moves_points_and_streaks(session_factory) -> None:
    winner = await _create_player(session_factory, "100", points=100)
    loser = await _create_player(session_factory, "200", points=30)
    match_id = await _report(session_factory, winner, loser)

    result = await _decide(session_factory, match_id, MatchDecision.APPROVE)

    assert result.match.status == "approved"
    assert result.match.decided_at is not None
    assert result.winner_ranked_up is False
    assert len(result.activity_ids) == 1

    winner_row = await _get_player(session_factory, winner.player_id)
    loser_row = await _get_player(session_factory, loser.player_id)
    assert (winner_row.points, winner_row.wins, winner_row.win_streak) == (150, 1, 1)
    assert (loser_row.points, loser_row.losses, loser_row.win_streak) == (10, 1, 0)
    assert winner_row.rank_tier == "Soldado"
    assert loser_row.rank_tier == "Recruta"

    assert await _event_types(session_factory) == ["new_player", "new_player", "match_approved"]


@pytest.mark.asyncio
async def test_loser_points_never_go_negative(session_factory) -> None:
    winner = await _create_player(session_factory, "100")
    loser = await _create_player(session_factory, "200", points=10)
    match_id = await _report(session_factory, winner, loser)

    result = await _decide(session_factory, match_id, MatchDecision.APPROVE)

    assert result.loser_after is not None
    assert result.loser_after.points == 0
    loser_row = await _get_player(session_factory, loser.player_id)
    assert loser_row.points == 0


@pytest.mark.asyncio
async def test_second_decision_is_rejected_and_changes_nothing(session_factory) -> None:
    winner = await _create_player(session_factory, "100")
    loser = await _create_player(session_factory, "200")
    match_id = await _report(session_factory, winner, loser)
    await _decide(session_factory, match_id, MatchDecision.APPROVE)
    winner_before = await _get_player(session_factory, winner.player_id)
    loser_before = await _get_player(session_factory, loser.player_id)

    for decision in (MatchDecision.APPROVE, MatchDecision.REJECT):
        with pytest.raises(MatchAlreadyDecidedError) as exc_info:
            await _decide(session_factory, match_id, decision, minutes=10)
        assert exc_info.value.status == "approved"

    winner_after = await _get_player(session_factory, winner.player_id)
    loser_after = await _get_player(session_factory, loser.player_id)
    assert (winner_after.points, winner_after.wins) == (winner_before.points, winner_before.wins)
    assert (loser_after.points, loser_after.losses) == (loser_before.points, loser_before.losses)
    assert (await _event_types(session_factory)).count("match_approved") == 1


@pytest.mark.asyncio
async def test_reject_leaves_players_untouched(session_factory) -> None:
    winner = await _create_player(session_factory, "100")
    loser = await _create_player(session_factory, "200")
    match_id = await _report(session_factory, winner, loser)

    result = await _decide(session_factory, match_id, MatchDecision.REJECT)

    assert result.match.status == "rejected"
    assert result.activity_ids == ()
    assert (await _get_player(session_factory, winner.player_id)).points == 100
    assert (await _get_player(session_factory, loser.player_id)).points == 100
    assert "match_approved" not in await _event_types(session_factory)


@pytest.mark.asyncio
async def test_crossing_a_tier_emits_rank_up_after_match_approved(session_factory) -> None:
    winner = await _create_player(session_factory, "100", points=280)
    loser = await _create_player(session_factory, "200")
    match_id = await _report(session_factory, winner, loser)

    result = await _decide(session_factory, match_id, MatchDecision.APPROVE)

    assert result.winner_ranked_up is True
    assert len(result.activity_ids) == 2
    assert (await _get_player(session_factory, winner.player_id)).rank_tier == "Guerreiro"
    assert (await _event_types(session_factory))[-2:] == ["match_approved", "rank_up"]


@pytest.mark.asyncio
async def test_self_match_is_refused_without_a_row(session_factory) -> None:
    player = await _create_player(session_factory, "100")

    with pytest.raises(SelfMatchError):
        async with session_factory.begin() as session:
            await MatchAdjudication.report_match(
                session,
                winner=player.ref,
                loser=PlayerRef(account_id="100", zone_id="1001"),
                now_utc=NOW,
            )

    async with session_factory() as session:
        assert await session.scalar(select(func.count()).select_from(Match)) == 0


@pytest.mark.asyncio
async def test_same_account_in_other_zone_is_a_distinct_player(session_factory) -> None:
    first = await _create_player(session_factory, "100", zone_id="1001")
    second = await _create_player(session_factory, "100", zone_id="2002")

    match_id = await _report(session_factory, first, second)
    await _decide(session_factory, match_id, MatchDecision.APPROVE)

    assert (await _get_player(session_factory, first.player_id)).points == 150
    assert (await _get_player(session_factory, second.player_id)).points == 80


@pytest.mark.asyncio
async def test_unknown_match_raises_not_found(session_factory) -> None:
    with pytest.raises(MatchNotFoundError):
        await _decide(session_factory, 999, MatchDecision.APPROVE)


@pytest.mark.asyncio
async def test_missing_loser_is_skipped_and_named_unknown(session_factory) -> None:
    winner = await _create_player(session_factory, "100")
    async with session_factory.begin() as session:
        match = await MatchAdjudication.report_match(
            session,
            winner=winner.ref,
            loser=PlayerRef(account_id="ghost", zone_id="0"),
            now_utc=NOW,
        )
        pending = await MatchAdjudication.get_pending_matches(session)

    assert [view.loser_name for view in pending] == [UNKNOWN_PLAYER_NAME]
    assert pending[0].winner_name == winner.display_name

    result = await _decide(session_factory, match.match_id, MatchDecision.APPROVE)

    assert result.loser_after is None
    assert (await _get_player(session_factory, winner.player_id)).points == 150


@pytest.mark.asyncio
async def test_failure_after_status_change_rolls_back_everything(session_factory, monkeypatch) -> None:
    winner = await _create_player(session_factory, "100")
    loser = await _create_player(session_factory, "200")
    match_id = await _report(session_factory, winner, loser)

    async def _broken_append(*args, **kwargs) -> int:
        raise RuntimeError("activity store unavailable")

    monkeypatch.setattr(match_service.ActivityLog, "append", _broken_append)

    with pytest.raises(RuntimeError):
        await _decide(session_factory, match_id, MatchDecision.APPROVE)

    async with session_factory() as session:
        match = await session.get(Match, match_id)
        assert match is not None
        assert match.status == "pending"
        assert match.decided_at is None
    assert (await _get_player(session_factory, winner.player_id)).points == 100
    assert (await _get_player(session_factory, loser.player_id)).points == 100


@pytest.mark.asyncio
async def test_history_and_arena_stats_count_approved_matches_only(session_factory) -> None:
    hero = await _create_player(session_factory, "100")
    rival = await _create_player(session_factory, "200")
    won = await _report(session_factory, hero, rival)
    lost = await _report(session_factory, rival, hero, now_utc=NOW + timedelta(minutes=1))
    won_again = await _report(session_factory, hero, rival, now_utc=NOW + timedelta(minutes=2))
    rejected = await _report(session_factory, hero, rival, now_utc=NOW + timedelta(minutes=3))
    await _report(session_factory, hero, rival, now_utc=NOW + timedelta(minutes=4))

    for match_id in (won, lost, won_again):
        await _decide(session_factory, match_id, MatchDecision.APPROVE)
    await _decide(session_factory, rejected, MatchDecision.REJECT)

    async with session_factory() as session:
        history = await MatchAdjudication.get_match_history(session, hero.ref)
        stats = await MatchAdjudication.get_arena_stats(session, hero.ref)
        pending = await MatchAdjudication.get_pending_matches(session)

    assert [entry.match.match_id for entry in history] == [won_again, lost, won]
    assert [entry.result for entry in history] == [MatchResult.WIN, MatchResult.LOSS, MatchResult.WIN]
    assert (stats.total_matches, stats.wins, stats.losses, stats.win_rate) == (3, 2, 1, 66.7)
    assert len(pending) == 1


@pytest.mark.asyncio
async def test_retired_tier_label_is_replaced_with_a_rank_up(session_factory) -> None:
    winner = await _create_player(session_factory, "100")
    loser = await _create_player(session_factory, "200")
    await _set_stored_tier(session_factory, winner.player_id, "Lenda")
    match_id = await _report(session_factory, winner, loser)

    result = await _decide(session_factory, match_id, MatchDecision.APPROVE)

    assert result.winner_ranked_up is True
    assert (await _get_player(session_factory, winner.player_id)).rank_tier == "Soldado"
    assert (await _event_types(session_factory))[-2:] == ["match_approved", "rank_up"]
