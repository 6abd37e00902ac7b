from arena.db.models.activity_events import ActivityEvent
from arena.db.models.activity_reactions import ActivityReaction
from arena.db.models.matches import Match
from arena.db.models.players import Player
from arena.db.models.reward_assignments import RewardAssignment
from arena.db.models.rewards import Reward

__all__ = [
    "ActivityEvent",
    "ActivityReaction",
    "Match",
    "Player",
    "Reward",
    "RewardAssignment",
]
