from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from arena.activity.service import ActivityLog
from arena.api.internal_auth import require_internal_token
from arena.core.config import get_settings
from arena.core.errors import ArenaError
from arena.db.session import SessionLocal

from .errors import as_http_exception
from .models import ActivityResponse, ReactionRequest, ReactionToggleResponse
from .serializers import activity_response

router = APIRouter(tags=["activities"])


@router.get("/activities", response_model=list[ActivityResponse])
async def list_activities(limit: int | None = Query(default=None, ge=0, le=200)) -> list[ActivityResponse]:
    if limit is None:
        limit = get_settings().activity_feed_default_limit
    async with SessionLocal() as session:
        activities = await ActivityLog.list_latest(session, limit=limit)
    return [activity_response(activity) for activity in activities]


@router.post("/activities/{activity_id}/reactions", response_model=ReactionToggleResponse)
async def toggle_reaction(activity_id: int, payload: ReactionRequest) -> ReactionToggleResponse:
    try:
        async with SessionLocal.begin() as session:
            active = await ActivityLog.toggle_reaction(
                session,
                activity_id=activity_id,
                user_id=payload.user_id,
                emoji=payload.emoji,
                now_utc=datetime.now(timezone.utc),
            )
    except ArenaError as exc:
        raise as_http_exception(exc) from exc
    return ReactionToggleResponse(activity_id=activity_id, emoji=payload.emoji, active=active)


@router.delete("/internal/activities", dependencies=[Depends(require_internal_token)])
async def clear_activities() -> dict[str, int]:
    async with SessionLocal.begin() as session:
        deleted = await ActivityLog.clear(session)
    return {"deleted": deleted}
