from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from arena.ledger.constants import PLAYER_MUTABLE_FIELDS, STATS_FIELDS
from arena.ledger.tiers import rank_tier_for


def normalize_player_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Validates a partial player update and derives the dependent columns.

    ``rank_tier`` is never accepted from callers: it is recomputed here whenever
    ``points`` is part of the change so both land in the same write.
    """
    unknown = set(changes) - PLAYER_MUTABLE_FIELDS
    if unknown:
        raise ValueError(f"unsupported player fields: {', '.join(sorted(unknown))}")

    values = dict(changes)
    for field in STATS_FIELDS & values.keys():
        value = values[field]
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{field} must be an integer")
        values[field] = max(0, value)

    if "points" in values:
        values["rank_tier"] = rank_tier_for(values["points"])

    if "display_name" in values:
        name = str(values["display_name"]).strip()
        if not name:
            raise ValueError("display_name must not be blank")
        values["display_name"] = name

    return values
