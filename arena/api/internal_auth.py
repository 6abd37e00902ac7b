from __future__ import annotations

import secrets

from fastapi import HTTPException, Request

from arena.core.config import get_settings

INTERNAL_TOKEN_HEADER = "X-Internal-Token"


def is_valid_internal_token(*, expected_token: str, received_token: str | None) -> bool:
    if not expected_token or not received_token:
        return False
    return secrets.compare_digest(expected_token, received_token)


def require_internal_token(request: Request) -> None:
    """Admin routes only accept callers presenting the shared internal token."""
    if not is_valid_internal_token(
        expected_token=get_settings().internal_api_token,
        received_token=request.headers.get(INTERNAL_TOKEN_HEADER),
    ):
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})
