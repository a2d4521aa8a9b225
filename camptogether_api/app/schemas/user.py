"""
Pydantic models for user data.

User records are created and refreshed from verified identities on login;
clients never write them directly, so only read schemas exist.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: str
    uid: str
    email: Optional[str] = Field(None, examples=["camper@example.com"])
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None


class UserPage(BaseModel):
    items: List[UserRead]
    next_cursor: Optional[str] = None
