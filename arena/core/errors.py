class ArenaError(Exception):
    """Base class for expected, caller-facing failures of the ledger core."""


class NotFoundError(ArenaError):
    pass


class InvalidTransitionError(ArenaError):
    pass


class InvalidReferenceError(ArenaError):
    pass
