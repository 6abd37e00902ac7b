from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from arena.activity.payloads import MatchApprovedPayload, RankUpPayload
from arena.activity.service import ActivityLog
from arena.activity.types import ActivityEventType
from arena.core.time import ensure_utc
from arena.db.models.matches import Match
from arena.db.models.players import Player
from arena.db.repo.matches_repo import MatchesRepo
from arena.db.repo.players_repo import PlayersRepo
from arena.ledger.constants import UNKNOWN_PLAYER_NAME
from arena.ledger.service import PlayerLedger
from arena.ledger.types import PlayerRef
from arena.matches.constants import MATCH_STATUS_APPROVED, MATCH_STATUS_PENDING
from arena.matches.errors import MatchAlreadyDecidedError, MatchNotFoundError, SelfMatchError
from arena.matches.rules import (
    apply_loss,
    apply_win,
    arena_stats,
    ensure_transition,
    ledger_changes,
    target_status,
)
from arena.matches.types import (
    ArenaStats,
    DecisionResult,
    MatchDecision,
    MatchHistoryEntry,
    MatchResult,
    MatchSnapshot,
    PendingMatchView,
    StatLine,
)

logger = structlog.get_logger(__name__)


def _stat_line(player: Player) -> StatLine:
    return StatLine(
        points=player.points,
        wins=player.wins,
        losses=player.losses,
        win_streak=player.win_streak,
        rank_tier=player.rank_tier,
    )


class MatchAdjudication:
    @staticmethod
    def snapshot(match: Match) -> MatchSnapshot:
        return MatchSnapshot(
            match_id=match.id,
            winner=PlayerRef(account_id=match.winner_account_id, zone_id=match.winner_zone_id),
            loser=PlayerRef(account_id=match.loser_account_id, zone_id=match.loser_zone_id),
            winner_hero=match.winner_hero,
            loser_hero=match.loser_hero,
            proof_ref=match.proof_ref,
            status=match.status,
            created_at=ensure_utc(match.created_at),
            decided_at=ensure_utc(match.decided_at) if match.decided_at is not None else None,
        )

    @staticmethod
    async def report_match(
        session: AsyncSession,
        *,
        winner: PlayerRef,
        loser: PlayerRef,
        now_utc: datetime,
        proof_ref: str | None = None,
        winner_hero: str | None = None,
        loser_hero: str | None = None,
    ) -> MatchSnapshot:
        if winner == loser:
            raise SelfMatchError(str(winner))

        match = await MatchesRepo.create(
            session,
            match=Match(
                winner_account_id=winner.account_id,
                winner_zone_id=winner.zone_id,
                loser_account_id=loser.account_id,
                loser_zone_id=loser.zone_id,
                winner_hero=winner_hero,
                loser_hero=loser_hero,
                proof_ref=proof_ref,
                status=MATCH_STATUS_PENDING,
                created_at=now_utc,
            ),
        )
        logger.info("match_reported", match_id=match.id, winner=str(winner), loser=str(loser))
        return MatchAdjudication.snapshot(match)

    @staticmethod
    async def _lock_participants(
        session: AsyncSession,
        match: Match,
    ) -> tuple[Player | None, Player | None]:
        refs = {
            "winner": (match.winner_account_id, match.winner_zone_id),
            "loser": (match.loser_account_id, match.loser_zone_id),
        }
        # Lock rows in a stable order so overlapping decisions cannot deadlock.
        locked: dict[str, Player | None] = {}
        for side, (account_id, zone_id) in sorted(refs.items(), key=lambda item: item[1]):
            locked[side] = await PlayersRepo.get_by_account_zone_for_update(
                session,
                account_id=account_id,
                zone_id=zone_id,
            )
        return locked["winner"], locked["loser"]

    @staticmethod
    async def decide(
        session: AsyncSession,
        *,
        match_id: int,
        decision: MatchDecision,
        now_utc: datetime,
    ) -> DecisionResult:
        """Moves a pending match to its terminal state exactly once.

        On approval the winner gains points, a win and a streak step; the loser
        loses points (floored at zero), gains a loss and drops their streak.
        Participants that no longer exist are skipped. Everything happens in
        the caller's transaction, so a failure leaves the match pending.
        """
        match = await MatchesRepo.get_by_id(session, match_id)
        if match is None:
            raise MatchNotFoundError(match_id)
        ensure_transition(match.id, match.status)

        new_status = target_status(decision)
        transitioned = await MatchesRepo.transition_status(
            session,
            match_id=match_id,
            from_status=MATCH_STATUS_PENDING,
            to_status=new_status,
            decided_at=now_utc,
        )
        if not transitioned:
            current = await MatchesRepo.get_by_id(session, match_id)
            raise MatchAlreadyDecidedError(match_id, current.status if current is not None else "unknown")

        match = await MatchesRepo.get_by_id(session, match_id)
        if new_status != MATCH_STATUS_APPROVED:
            logger.info("match_decided", match_id=match_id, status=new_status)
            return DecisionResult(
                match=MatchAdjudication.snapshot(match),
                winner_after=None,
                loser_after=None,
                winner_ranked_up=False,
                activity_ids=(),
            )

        winner, loser = await MatchAdjudication._lock_participants(session, match)

        winner_before = winner_after = None
        if winner is not None:
            winner_before = _stat_line(winner)
            winner_after = apply_win(winner_before)
            await PlayerLedger.update_player(
                session,
                player_id=winner.id,
                changes=ledger_changes(winner_after),
                now_utc=now_utc,
                expected_version=winner.version,
            )

        loser_after = None
        if loser is not None:
            loser_after = apply_loss(_stat_line(loser))
            await PlayerLedger.update_player(
                session,
                player_id=loser.id,
                changes=ledger_changes(loser_after),
                now_utc=now_utc,
                expected_version=loser.version,
            )

        activity_ids: list[int] = []
        ranked_up = False
        if winner is not None and winner_before is not None and winner_after is not None:
            activity_ids.append(
                await ActivityLog.append(
                    session,
                    event_type=ActivityEventType.MATCH_APPROVED,
                    player_id=winner.id,
                    display_name=winner.display_name,
                    payload=MatchApprovedPayload(
                        opponent_name=loser.display_name if loser is not None else UNKNOWN_PLAYER_NAME,
                        winner_hero=match.winner_hero,
                        proof_ref=match.proof_ref,
                        match_id=match.id,
                    ),
                    now_utc=now_utc,
                )
            )
            if winner_after.rank_tier != winner_before.rank_tier:
                ranked_up = True
                activity_ids.append(
                    await ActivityLog.append(
                        session,
                        event_type=ActivityEventType.RANK_UP,
                        player_id=winner.id,
                        display_name=winner.display_name,
                        payload=RankUpPayload(
                            new_rank=winner_after.rank_tier,
                            previous_rank=winner_before.rank_tier,
                        ),
                        now_utc=now_utc,
                    )
                )

        logger.info(
            "match_decided",
            match_id=match_id,
            status=new_status,
            winner_id=winner.id if winner is not None else None,
            loser_id=loser.id if loser is not None else None,
            winner_ranked_up=ranked_up,
        )
        return DecisionResult(
            match=MatchAdjudication.snapshot(match),
            winner_after=winner_after,
            loser_after=loser_after,
            winner_ranked_up=ranked_up,
            activity_ids=tuple(activity_ids),
        )

    @staticmethod
    async def get_pending_matches(session: AsyncSession) -> list[PendingMatchView]:
        matches = await MatchesRepo.list_by_status(session, status=MATCH_STATUS_PENDING)
        refs: set[tuple[str, str]] = set()
        for match in matches:
            refs.add((match.winner_account_id, match.winner_zone_id))
            refs.add((match.loser_account_id, match.loser_zone_id))
        players = await PlayersRepo.list_by_refs(session, refs)

        def _name(ref: tuple[str, str]) -> str:
            player = players.get(ref)
            return player.display_name if player is not None else UNKNOWN_PLAYER_NAME

        return [
            PendingMatchView(
                match=MatchAdjudication.snapshot(match),
                winner_name=_name((match.winner_account_id, match.winner_zone_id)),
                loser_name=_name((match.loser_account_id, match.loser_zone_id)),
            )
            for match in matches
        ]

    @staticmethod
    async def get_match_history(session: AsyncSession, ref: PlayerRef) -> list[MatchHistoryEntry]:
        matches = await MatchesRepo.list_for_ref(
            session,
            account_id=ref.account_id,
            zone_id=ref.zone_id,
            status=MATCH_STATUS_APPROVED,
        )
        entries: list[MatchHistoryEntry] = []
        for match in matches:
            snapshot = MatchAdjudication.snapshot(match)
            result = MatchResult.WIN if snapshot.winner == ref else MatchResult.LOSS
            entries.append(MatchHistoryEntry(match=snapshot, result=result))
        return entries

    @staticmethod
    async def get_arena_stats(session: AsyncSession, ref: PlayerRef) -> ArenaStats:
        history = await MatchAdjudication.get_match_history(session, ref)
        wins = sum(1 for entry in history if entry.result == MatchResult.WIN)
        return arena_stats(wins=wins, losses=len(history) - wins)
