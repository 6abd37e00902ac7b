from __future__ import annotations

from datetime import date

from arena.core.errors import ArenaError


class AlreadyClaimedTodayError(ArenaError):
    def __init__(self, player_id: int, local_date: date) -> None:
        super().__init__(f"player {player_id} already claimed on {local_date.isoformat()}")
        self.player_id = player_id
        self.local_date = local_date
