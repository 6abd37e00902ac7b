"""Rank tiers derived from a player's current points total."""

from __future__ import annotations

from bisect import bisect_right

# Ascending thresholds; a tier applies from its threshold up to the next one.
RANK_TIERS: tuple[tuple[int, str], ...] = (
    (0, "Recruta"),
    (100, "Soldado"),
    (300, "Guerreiro"),
    (600, "Elite"),
    (1000, "Mestre"),
    (2000, "Grande Mestre"),
)

_THRESHOLDS = tuple(threshold for threshold, _ in RANK_TIERS)
_LABELS = tuple(label for _, label in RANK_TIERS)


def rank_tier_for(points: int) -> str:
    """Returns the label of the highest threshold not exceeding ``points``.

    Callers must pass a non-negative total; the ledger clamps before calling.
    """
    return _LABELS[max(0, bisect_right(_THRESHOLDS, points) - 1)]
