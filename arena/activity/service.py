from __future__ import annotations

from collections import defaultdict
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from arena.activity.errors import ActivityNotFoundError
from arena.activity.payloads import ActivityPayload, payload_from_json, payload_to_json
from arena.activity.types import ActivityEventType, ActivitySnapshot, ReactionSnapshot
from arena.core.time import ensure_utc
from arena.db.models.activity_events import ActivityEvent
from arena.db.models.activity_reactions import ActivityReaction
from arena.db.repo.activity_repo import ActivityRepo

logger = structlog.get_logger(__name__)


class ActivityLog:
    @staticmethod
    def _reaction_snapshot(reaction: ActivityReaction) -> ReactionSnapshot:
        return ReactionSnapshot(
            reaction_id=reaction.id,
            user_id=reaction.user_id,
            emoji=reaction.emoji,
            created_at=ensure_utc(reaction.created_at),
        )

    @staticmethod
    def _snapshot_from_model(
        event: ActivityEvent,
        reactions: list[ActivityReaction],
    ) -> ActivitySnapshot:
        return ActivitySnapshot(
            activity_id=event.id,
            event_type=ActivityEventType(event.event_type),
            player_id=event.player_id,
            player_display_name=event.player_display_name,
            payload=payload_from_json(event.event_type, event.payload),
            created_at=ensure_utc(event.created_at),
            reactions=tuple(ActivityLog._reaction_snapshot(reaction) for reaction in reactions),
        )

    @staticmethod
    async def append(
        session: AsyncSession,
        *,
        event_type: ActivityEventType,
        player_id: int | None,
        display_name: str | None,
        payload: ActivityPayload,
        now_utc: datetime,
    ) -> int:
        event = await ActivityRepo.create(
            session,
            event=ActivityEvent(
                event_type=event_type.value,
                player_id=player_id,
                player_display_name=display_name,
                payload=payload_to_json(event_type.value, payload),
                created_at=now_utc,
            ),
        )
        logger.info(
            "activity_appended",
            activity_id=event.id,
            event_type=event_type.value,
            player_id=player_id,
        )
        return event.id

    @staticmethod
    async def list_latest(session: AsyncSession, *, limit: int) -> list[ActivitySnapshot]:
        if limit <= 0:
            return []
        events = await ActivityRepo.list_latest(session, limit=limit)
        reactions_by_event: dict[int, list[ActivityReaction]] = defaultdict(list)
        for reaction in await ActivityRepo.list_reactions(session, [event.id for event in events]):
            reactions_by_event[reaction.activity_id].append(reaction)
        return [
            ActivityLog._snapshot_from_model(event, reactions_by_event[event.id])
            for event in events
        ]

    @staticmethod
    async def toggle_reaction(
        session: AsyncSession,
        *,
        activity_id: int,
        user_id: str,
        emoji: str,
        now_utc: datetime,
    ) -> bool:
        """Removes the exact reaction if present, otherwise adds it.

        Returns True when the reaction is present after the call.
        """
        if await ActivityRepo.get_by_id(session, activity_id) is None:
            raise ActivityNotFoundError(activity_id)

        removed = await ActivityRepo.delete_reaction(
            session,
            activity_id=activity_id,
            user_id=user_id,
            emoji=emoji,
        )
        if removed:
            return False

        await ActivityRepo.create_reaction(
            session,
            reaction=ActivityReaction(
                activity_id=activity_id,
                user_id=user_id,
                emoji=emoji,
                created_at=now_utc,
            ),
        )
        return True

    @staticmethod
    async def clear(session: AsyncSession) -> int:
        deleted = await ActivityRepo.delete_all(session)
        logger.warning("activity_log_cleared", deleted_events=deleted)
        return deleted
