"""
Business logic for event checklists.

Checklist items belong to exactly one event and are visible to event
members only.  Toggling runs as a single-document transaction so that
concurrent togglers each see a consistent before-image.
"""

import logging
from typing import Any, List, Optional

from ..core.db import Collections, FirestoreOperators, get_store
from ..core.errors import ItemEventMismatch, NotFound
from ..core.security import Identity
from ..schemas.checklist import ChecklistItemCreate, ChecklistItemRead
from ..schemas.common import parse_payload
from .common import utcnow
from .event_service import EventService

logger = logging.getLogger(__name__)


class ChecklistService:
    """Service for the shared gear and food checklist of an event."""

    @classmethod
    async def list_items(cls, event_id: str, caller: Optional[Identity]) -> List[ChecklistItemRead]:
        await EventService.load_for_member(event_id, caller)
        documents = await get_store().query(
            Collections.CHECKLIST_ITEMS,
            filters=[("event_id", FirestoreOperators.EQ, event_id)],
        )
        items = [ChecklistItemRead(**doc) for doc in documents]
        items.sort(key=lambda item: (item.created_at is None, item.created_at))
        return items

    @classmethod
    async def add_item(cls, event_id: str, payload: Any, caller: Optional[Identity]) -> ChecklistItemRead:
        """Add an item to the event checklist.

        ``payload`` is the raw request body.  It is validated after the
        404/403 checks, so a non-member never sees schema errors.
        """
        await EventService.load_for_member(event_id, caller)
        data = parse_payload(ChecklistItemCreate, payload)
        item_data = data.model_dump(mode="json")
        item_data.update(
            event_id=event_id,
            is_checked=False,
            claims=[],
            created_at=utcnow(),
        )
        item_id = await get_store().add(Collections.CHECKLIST_ITEMS, item_data)
        logger.info(
            "User %s added checklist item %s to event %s",
            caller.id,
            item_id,
            event_id,
            extra={"operation": "add_checklist_item", "user_id": caller.id, "event_id": event_id, "item_id": item_id},
        )
        return ChecklistItemRead(id=item_id, **item_data)

    @classmethod
    async def toggle_item(cls, event_id: str, item_id: str, caller: Optional[Identity]) -> bool:
        """Flip ``is_checked`` atomically and return the new value.

        Raises ``NotFound`` for an unknown item and ``ItemEventMismatch``
        when the item belongs to a different event.
        """
        await EventService.load_for_member(event_id, caller)

        def _flip(item):
            if item is None:
                raise NotFound("Item not found")
            if item.get("event_id") != event_id:
                raise ItemEventMismatch()
            checked = not bool(item.get("is_checked"))
            return {"is_checked": checked}, checked

        checked = await get_store().run_transaction(Collections.CHECKLIST_ITEMS, item_id, _flip)
        logger.info(
            "User %s set item %s of event %s to checked=%s",
            caller.id,
            item_id,
            event_id,
            checked,
            extra={"operation": "toggle_checklist_item", "user_id": caller.id, "event_id": event_id, "item_id": item_id},
        )
        return checked
