"""
Pydantic models for checklist items (shared gear and food).
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ItemType(str, Enum):
    GEAR = "GEAR"
    FOOD = "FOOD"


class ChecklistClaim(BaseModel):
    user_id: str
    quantity: int = Field(1, gt=0)


class ChecklistItemCreate(BaseModel):
    """Schema for adding an item to an event checklist.

    Numeric strings are accepted for ``quantity``.
    """

    name: str = Field(..., min_length=1, max_length=120, examples=["Tent"])
    quantity: int = Field(1, gt=0, examples=[2])
    note: str = Field("", max_length=200)
    item_type: ItemType = ItemType.GEAR
    is_personal: bool = False
    assigned_to_id: Optional[str] = None


class ChecklistItemRead(BaseModel):
    id: str
    event_id: str
    name: str
    quantity: int = 1
    note: str = ""
    item_type: ItemType = ItemType.GEAR
    is_personal: bool = False
    is_checked: bool = False
    assigned_to_id: Optional[str] = None
    claims: List[ChecklistClaim] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class ToggleResponse(BaseModel):
    is_checked: bool
