"""
Event endpoints for API v1.

Listing and reading single events is open to anonymous callers (listing
``scope=mine`` needs a token).  Creating, updating, deleting and joining
require an authenticated caller; update and delete are further limited
to the host or an admin by ``EventService``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from camptogether_api.app.core.security import (
    Identity,
    get_current_identity,
    get_optional_identity,
    require_admin,
)
from camptogether_api.app.schemas.common import SuccessResponse
from camptogether_api.app.schemas.event import EventCreate, EventPage, EventRead, EventUpdate
from camptogether_api.app.services.event_service import EventService

router = APIRouter()


@router.get("", response_model=EventPage)
async def list_events(
    limit: Optional[str] = Query(None, description="Page size, clamped to 1..50 (default 20)"),
    cursor: Optional[str] = Query(None, description="Id of the last event of the previous page"),
    scope: Optional[str] = Query(None, description="'mine' for events you attend, otherwise public events"),
    search: Optional[str] = Query(None, description="Case-insensitive title prefix"),
    current_user: Optional[Identity] = Depends(get_optional_identity),
) -> EventPage:
    """List events ordered by start date, newest first."""
    return await EventService.list_events(
        scope=scope,
        search=search,
        limit=limit,
        cursor=cursor,
        caller=current_user,
    )


@router.get("/admin/all", response_model=List[EventRead])
async def list_all_events(current_user: Identity = Depends(require_admin)) -> List[EventRead]:
    """Every event regardless of visibility (admins only)."""
    return await EventService.list_all()


@router.get("/{event_id}", response_model=EventRead)
async def get_event(event_id: str) -> EventRead:
    return await EventService.get_event(event_id)


@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(
    event: EventCreate,
    current_user: Identity = Depends(get_current_identity),
) -> EventRead:
    """Create a new event hosted by the caller."""
    return await EventService.create_event(event, current_user)


@router.put("/{event_id}", response_model=EventRead)
async def update_event(
    event_id: str,
    updates: EventUpdate,
    current_user: Identity = Depends(get_current_identity),
) -> EventRead:
    """Update an existing event.

    Partial updates are supported; any unspecified fields remain unchanged.
    """
    return await EventService.update_event(event_id, updates, current_user)


@router.delete("/{event_id}", response_model=SuccessResponse)
async def delete_event(
    event_id: str,
    current_user: Identity = Depends(get_current_identity),
) -> SuccessResponse:
    await EventService.delete_event(event_id, current_user)
    return SuccessResponse()


@router.post("/{event_id}/join", response_model=SuccessResponse)
async def join_event(
    event_id: str,
    current_user: Identity = Depends(get_current_identity),
) -> SuccessResponse:
    """Join an event as an attendee.  Joining twice is a no-op."""
    await EventService.join_event(event_id, current_user)
    return SuccessResponse()
