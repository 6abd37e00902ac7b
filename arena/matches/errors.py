from arena.core.errors import ArenaError, InvalidTransitionError, NotFoundError


class MatchNotFoundError(NotFoundError):
    pass


class SelfMatchError(ArenaError):
    pass


class MatchAlreadyDecidedError(InvalidTransitionError):
    def __init__(self, match_id: int, status: str) -> None:
        super().__init__(f"match {match_id} is already {status}")
        self.match_id = match_id
        self.status = status
