STARTING_POINTS = 100
UNKNOWN_PLAYER_NAME = "Soldado Desconhecido"

PROFILE_FIELDS = frozenset({"display_name", "bio", "main_hero", "avatar_url", "socials"})
STATS_FIELDS = frozenset({"points", "wins", "losses", "win_streak"})
PLAYER_MUTABLE_FIELDS = PROFILE_FIELDS | STATS_FIELDS | frozenset({"is_banned", "last_daily_claim_at"})
