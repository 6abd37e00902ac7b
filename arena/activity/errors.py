from arena.core.errors import NotFoundError


class ActivityNotFoundError(NotFoundError):
    pass
