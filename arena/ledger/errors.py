from arena.core.errors import ArenaError, NotFoundError


class PlayerNotFoundError(NotFoundError):
    pass


class PlayerAlreadyRegisteredError(ArenaError):
    pass


class PlayerWriteConflictError(ArenaError):
    """The player row changed between the caller's read and its write."""
