from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response

from arena.api.internal_auth import require_internal_token
from arena.core.config import get_settings
from arena.core.errors import ArenaError
from arena.db.session import SessionLocal
from arena.rewards.service import RewardService

from .errors import as_http_exception
from .models import (
    RewardBatchRequest,
    RewardBatchResponse,
    RewardCreateRequest,
    RewardResponse,
    RewardUpdateRequest,
)
from .serializers import assignment_response, reward_response

router = APIRouter(tags=["rewards"])


@router.get("/rewards", response_model=list[RewardResponse])
async def list_rewards() -> list[RewardResponse]:
    async with SessionLocal() as session:
        rewards = await RewardService.list_rewards(session)
    return [reward_response(reward) for reward in rewards]


@router.post(
    "/internal/rewards",
    response_model=RewardResponse,
    status_code=201,
    dependencies=[Depends(require_internal_token)],
)
async def create_reward(payload: RewardCreateRequest) -> RewardResponse:
    try:
        async with SessionLocal.begin() as session:
            reward = await RewardService.create_reward(session, **payload.model_dump())
    except ArenaError as exc:
        raise as_http_exception(exc) from exc
    return reward_response(reward)


@router.patch(
    "/internal/rewards/{reward_id}",
    response_model=RewardResponse,
    dependencies=[Depends(require_internal_token)],
)
async def update_reward(reward_id: int, payload: RewardUpdateRequest) -> RewardResponse:
    changes = {field: value for field, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    try:
        async with SessionLocal.begin() as session:
            reward = await RewardService.update_reward(session, reward_id=reward_id, changes=changes)
    except ArenaError as exc:
        raise as_http_exception(exc) from exc
    return reward_response(reward)


@router.delete(
    "/internal/rewards/{reward_id}",
    status_code=204,
    dependencies=[Depends(require_internal_token)],
)
async def delete_reward(reward_id: int) -> Response:
    try:
        async with SessionLocal.begin() as session:
            await RewardService.delete_reward(session, reward_id=reward_id)
    except ArenaError as exc:
        raise as_http_exception(exc) from exc
    return Response(status_code=204)


@router.post(
    "/internal/rewards/batch",
    response_model=RewardBatchResponse,
    dependencies=[Depends(require_internal_token)],
)
async def batch_assign_rewards(payload: RewardBatchRequest) -> RewardBatchResponse:
    settings = get_settings()
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await RewardService.batch_assign_by_rank(
                session,
                rank_target=payload.rank_target,
                reward_id=payload.reward_id,
                now_utc=now_utc,
                expires_days=payload.expires_days,
                allow_duplicates=settings.reward_allow_duplicate_grants,
            )
    except ArenaError as exc:
        raise as_http_exception(exc) from exc

    return RewardBatchResponse(
        rank_target=result.rank_target,
        reward_id=result.reward_id,
        assignments=[assignment_response(assignment, now_utc=now_utc) for assignment in result.assignments],
    )
