"""Per-event-type payloads stored on activity events.

Each event type has exactly one payload shape. Payloads are persisted as JSON
with their fields only; the event type column selects the shape on read.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any


@dataclass(frozen=True, slots=True)
class MatchApprovedPayload:
    opponent_name: str
    winner_hero: str | None = None
    proof_ref: str | None = None
    match_id: int | None = None


@dataclass(frozen=True, slots=True)
class RankUpPayload:
    new_rank: str
    previous_rank: str | None = None


@dataclass(frozen=True, slots=True)
class RewardEarnedPayload:
    reward_id: int
    reward_name: str
    reward_icon: str
    rarity: str
    expires_at: str | None = None


@dataclass(frozen=True, slots=True)
class NewPlayerPayload:
    account_id: str
    zone_id: str


@dataclass(frozen=True, slots=True)
class DailyClaimPayload:
    points: int


ActivityPayload = (
    MatchApprovedPayload | RankUpPayload | RewardEarnedPayload | NewPlayerPayload | DailyClaimPayload
)

PAYLOAD_TYPES: dict[str, type[Any]] = {
    "match_approved": MatchApprovedPayload,
    "rank_up": RankUpPayload,
    "reward_earned": RewardEarnedPayload,
    "new_player": NewPlayerPayload,
    "daily_claim": DailyClaimPayload,
}


def payload_to_json(event_type: str, payload: ActivityPayload) -> dict[str, object]:
    expected = PAYLOAD_TYPES.get(event_type)
    if expected is None:
        raise ValueError(f"unknown activity event type: {event_type}")
    if not isinstance(payload, expected):
        raise ValueError(f"{event_type} expects {expected.__name__}, got {type(payload).__name__}")
    return asdict(payload)


def payload_from_json(event_type: str, data: dict[str, Any] | None) -> ActivityPayload:
    payload_type = PAYLOAD_TYPES.get(event_type)
    if payload_type is None:
        raise ValueError(f"unknown activity event type: {event_type}")
    known = {field.name for field in fields(payload_type)}
    return payload_type(**{key: value for key, value in (data or {}).items() if key in known})
