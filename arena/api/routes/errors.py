from __future__ import annotations

from fastapi import HTTPException

from arena.activity.errors import ActivityNotFoundError
from arena.core.errors import ArenaError, InvalidReferenceError
from arena.daily.errors import AlreadyClaimedTodayError
from arena.ledger.errors import (
    PlayerAlreadyRegisteredError,
    PlayerNotFoundError,
    PlayerWriteConflictError,
)
from arena.matches.errors import MatchAlreadyDecidedError, MatchNotFoundError, SelfMatchError
from arena.rewards.errors import InvalidExpiryError, InvalidRewardError, RewardNotFoundError

_ERROR_RESPONSES: tuple[tuple[type[Exception], int, str], ...] = (
    (PlayerNotFoundError, 404, "E_PLAYER_NOT_FOUND"),
    (MatchNotFoundError, 404, "E_MATCH_NOT_FOUND"),
    (RewardNotFoundError, 404, "E_REWARD_NOT_FOUND"),
    (ActivityNotFoundError, 404, "E_ACTIVITY_NOT_FOUND"),
    (MatchAlreadyDecidedError, 409, "E_MATCH_ALREADY_DECIDED"),
    (AlreadyClaimedTodayError, 409, "E_ALREADY_CLAIMED_TODAY"),
    (PlayerAlreadyRegisteredError, 409, "E_PLAYER_ALREADY_REGISTERED"),
    (PlayerWriteConflictError, 409, "E_WRITE_CONFLICT"),
    (SelfMatchError, 422, "E_SELF_MATCH"),
    (InvalidReferenceError, 422, "E_INVALID_REFERENCE"),
    (InvalidExpiryError, 422, "E_INVALID_EXPIRY"),
    (InvalidRewardError, 422, "E_INVALID_REWARD"),
)


def as_http_exception(exc: ArenaError | ValueError) -> HTTPException:
    for error_type, status_code, code in _ERROR_RESPONSES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail={"code": code})
    return HTTPException(status_code=422, detail={"code": "E_INVALID_INPUT"})
