REWARD_RARITIES = ("rare", "epic", "legendary", "mythic")
REWARD_MIN_STARS = 1
REWARD_MAX_STARS = 7

# Batch targets select the first N players by standing.
RANK_TARGET_SIZES: dict[str, int] = {
    "top1": 1,
    "top2": 2,
    "top3": 3,
    "top10": 10,
}
