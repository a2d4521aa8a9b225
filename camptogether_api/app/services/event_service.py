"""
Business logic for events.

Events live in the ``events`` collection.  The creator becomes the host
and first attendee; other users become attendees through ``join_event``.
Authorization decisions come from ``core.permissions`` and are always
made on the event document loaded once per request.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from ..core.db import Collections, FirestoreOperators, OrderByDirection, get_store
from ..core.errors import Forbidden, NotFound, Unauthorized
from ..core.permissions import can_manage_event, is_event_member
from ..core.security import Identity
from ..schemas.event import EventCreate, EventPage, EventRead, EventUpdate
from .common import clamp_limit, next_cursor, utcnow

logger = logging.getLogger(__name__)

SCOPE_MINE = "mine"
# Upper bound for Firestore prefix range queries.
PREFIX_SENTINEL = "\uf8ff"


class EventService:
    """Service for managing events and their membership."""

    @classmethod
    async def load_event(cls, event_id: str) -> Dict[str, Any]:
        """Fetch the raw event document or raise ``NotFound``."""
        event = await get_store().get(Collections.EVENTS, event_id)
        if event is None:
            raise NotFound("Event not found")
        return event

    @classmethod
    async def load_for_member(cls, event_id: str, caller: Optional[Identity]) -> Dict[str, Any]:
        """Fetch an event the caller belongs to.

        Raises ``Unauthorized`` without a caller, ``NotFound`` when the
        event does not exist and ``Forbidden`` for non-members.
        """
        if caller is None:
            raise Unauthorized()
        event = await cls.load_event(event_id)
        if not is_event_member(event, caller):
            raise Forbidden()
        return event

    @classmethod
    async def list_events(
        cls,
        scope: Optional[str] = None,
        search: Optional[str] = None,
        limit: Any = None,
        cursor: Optional[str] = None,
        caller: Optional[Identity] = None,
    ) -> EventPage:
        """Return one page of events, newest ``start_date`` first.

        - ``scope="mine"`` lists events the caller attends and requires a
          caller; anything else lists public events.
        - ``search`` is a case-insensitive title prefix.
        - ``limit`` is clamped to ``[1, 50]`` (default 20).
        - ``cursor`` is the id of the last event of the previous page.
        """
        if scope == SCOPE_MINE:
            if caller is None:
                raise Unauthorized()
            filters = [("attendee_ids", FirestoreOperators.ARRAY_CONTAINS, caller.id)]
        else:
            filters = [("is_public", FirestoreOperators.EQ, True)]

        term = (search or "").strip().lower()
        if term:
            filters.append(("title_lower", FirestoreOperators.GTE, term))
            filters.append(("title_lower", FirestoreOperators.LTE, term + PREFIX_SENTINEL))

        documents = await get_store().query(
            Collections.EVENTS,
            filters=filters,
            order_by=[("start_date", OrderByDirection.DESCENDING)],
            limit=clamp_limit(limit),
            start_after=cursor or None,
        )
        return EventPage(
            items=[EventRead(**doc) for doc in documents],
            next_cursor=next_cursor(documents),
        )

    @classmethod
    async def list_all(cls) -> List[EventRead]:
        """Every event, newest ``start_date`` first (admin view)."""
        documents = await get_store().query(
            Collections.EVENTS,
            order_by=[("start_date", OrderByDirection.DESCENDING)],
        )
        return [EventRead(**doc) for doc in documents]

    @classmethod
    async def get_event(cls, event_id: str) -> EventRead:
        return EventRead(**await cls.load_event(event_id))

    @classmethod
    async def create_event(cls, data: EventCreate, caller: Identity) -> EventRead:
        """Create an event hosted by ``caller``.

        Every derived field is computed before the single write.
        """
        now = utcnow()
        event_data = data.model_dump()
        event_data.update(
            title_lower=data.title.lower(),
            host_id=caller.id,
            attendee_ids=[caller.id],
            invite_token=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
        )
        event_id = await get_store().add(Collections.EVENTS, event_data)
        logger.info(
            "User %s created event %s (%r)",
            caller.id,
            event_id,
            data.title,
            extra={"operation": "create_event", "user_id": caller.id, "event_id": event_id},
        )
        return EventRead(id=event_id, **event_data)

    @classmethod
    async def update_event(cls, event_id: str, updates: EventUpdate, caller: Identity) -> EventRead:
        """Apply a partial update.

        Only the host or an admin may update.  Fields left out of the patch
        keep their stored value; ``EventUpdate`` rejects explicit nulls.
        """
        event = await cls.load_event(event_id)
        if not can_manage_event(event, caller):
            raise Forbidden()

        changes = updates.model_dump(exclude_unset=True)
        if "title" in changes:
            changes["title_lower"] = changes["title"].lower()
        changes["updated_at"] = utcnow()

        await get_store().update(Collections.EVENTS, event_id, changes)
        logger.info(
            "User %s updated event %s: %s",
            caller.id,
            event_id,
            sorted(changes),
            extra={"operation": "update_event", "user_id": caller.id, "event_id": event_id},
        )
        event.update(changes)
        return EventRead(**event)

    @classmethod
    async def delete_event(cls, event_id: str, caller: Identity) -> None:
        event = await cls.load_event(event_id)
        if not can_manage_event(event, caller):
            raise Forbidden()
        await get_store().delete(Collections.EVENTS, event_id)
        logger.info(
            "User %s deleted event %s",
            caller.id,
            event_id,
            extra={"operation": "delete_event", "user_id": caller.id, "event_id": event_id},
        )

    @classmethod
    async def join_event(cls, event_id: str, caller: Identity) -> None:
        """Add the caller to the attendees.

        Uses an array union, so repeated or concurrent joins are no-ops.
        """
        await cls.load_event(event_id)
        await get_store().array_union(Collections.EVENTS, event_id, "attendee_ids", [caller.id])
        logger.info(
            "User %s joined event %s",
            caller.id,
            event_id,
            extra={"operation": "join_event", "user_id": caller.id, "event_id": event_id},
        )
