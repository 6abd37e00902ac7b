from arena.core.errors import ArenaError, NotFoundError


class RewardNotFoundError(NotFoundError):
    pass


class InvalidRewardError(ArenaError):
    pass


class InvalidExpiryError(ArenaError):
    pass
