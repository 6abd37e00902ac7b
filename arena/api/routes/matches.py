from __future__ import annotations

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends

from arena.api.internal_auth import require_internal_token
from arena.core.errors import ArenaError
from arena.db.session import SessionLocal
from arena.ledger.types import PlayerRef
from arena.matches.service import MatchAdjudication
from arena.matches.types import MatchDecision

from .errors import as_http_exception
from .models import DecisionResponse, MatchReportRequest, MatchResponse, PendingMatchResponse
from .serializers import match_response, pending_match_response

router = APIRouter(tags=["matches"])
logger = structlog.get_logger(__name__)


@router.post("/matches", response_model=MatchResponse, status_code=201)
async def report_match(payload: MatchReportRequest) -> MatchResponse:
    try:
        async with SessionLocal.begin() as session:
            match = await MatchAdjudication.report_match(
                session,
                winner=PlayerRef(account_id=payload.winner_account_id, zone_id=payload.winner_zone_id),
                loser=PlayerRef(account_id=payload.loser_account_id, zone_id=payload.loser_zone_id),
                now_utc=datetime.now(timezone.utc),
                proof_ref=payload.proof_ref,
                winner_hero=payload.winner_hero,
                loser_hero=payload.loser_hero,
            )
    except ArenaError as exc:
        raise as_http_exception(exc) from exc
    return match_response(match)


@router.get(
    "/internal/matches/pending",
    response_model=list[PendingMatchResponse],
    dependencies=[Depends(require_internal_token)],
)
async def list_pending_matches() -> list[PendingMatchResponse]:
    async with SessionLocal() as session:
        pending = await MatchAdjudication.get_pending_matches(session)
    return [pending_match_response(view) for view in pending]


@router.post(
    "/internal/matches/{match_id}/{decision}",
    response_model=DecisionResponse,
    dependencies=[Depends(require_internal_token)],
)
async def decide_match(match_id: int, decision: MatchDecision) -> DecisionResponse:
    try:
        async with SessionLocal.begin() as session:
            result = await MatchAdjudication.decide(
                session,
                match_id=match_id,
                decision=decision,
                now_utc=datetime.now(timezone.utc),
            )
    except ArenaError as exc:
        logger.info(
            "match_decision_refused",
            match_id=match_id,
            decision=decision.value,
            error_type=type(exc).__name__,
        )
        raise as_http_exception(exc) from exc

    return DecisionResponse(
        match=match_response(result.match),
        winner_ranked_up=result.winner_ranked_up,
        activity_ids=list(result.activity_ids),
    )
