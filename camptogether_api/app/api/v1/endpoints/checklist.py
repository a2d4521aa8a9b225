"""
Checklist endpoints for API v1.

All routes require an authenticated event member (host, attendee or
admin).
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, status

from camptogether_api.app.core.security import Identity, get_current_identity
from camptogether_api.app.schemas.checklist import ChecklistItemCreate, ChecklistItemRead, ToggleResponse
from camptogether_api.app.schemas.common import request_body_schema
from camptogether_api.app.services.checklist_service import ChecklistService

router = APIRouter()


@router.get("/{event_id}/checklist", response_model=List[ChecklistItemRead])
async def list_checklist(
    event_id: str,
    current_user: Identity = Depends(get_current_identity),
) -> List[ChecklistItemRead]:
    return await ChecklistService.list_items(event_id, current_user)


@router.post(
    "/{event_id}/checklist",
    response_model=ChecklistItemRead,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=request_body_schema(ChecklistItemCreate),
)
async def add_checklist_item(
    event_id: str,
    payload: Any = Body(None, description="ChecklistItemCreate, validated after the membership check"),
    current_user: Identity = Depends(get_current_identity),
) -> ChecklistItemRead:
    return await ChecklistService.add_item(event_id, payload, current_user)


@router.put("/{event_id}/checklist/{item_id}/toggle", response_model=ToggleResponse)
async def toggle_checklist_item(
    event_id: str,
    item_id: str,
    current_user: Identity = Depends(get_current_identity),
) -> ToggleResponse:
    """Flip the checked state of an item.

    Returns 400 when the item belongs to another event.
    """
    checked = await ChecklistService.toggle_item(event_id, item_id, current_user)
    return ToggleResponse(is_checked=checked)
