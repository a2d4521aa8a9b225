"""
User and session endpoints for API v1.

``GET /auth/me`` is the login hook: the client calls it after signing in
with the identity provider, and the caller's user record is created or
refreshed on the way.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from camptogether_api.app.core.security import Identity, get_current_identity, require_admin
from camptogether_api.app.schemas.user import UserPage, UserRead
from camptogether_api.app.services.user_service import UserService

router = APIRouter()


@router.get("/me", response_model=UserRead)
async def read_me(current_user: Identity = Depends(get_current_identity)) -> UserRead:
    """Return the caller's profile, creating it on first login."""
    return await UserService.get_or_create(current_user)


@router.get("/user/{user_id}", response_model=UserRead)
async def read_user(
    user_id: str,
    current_user: Identity = Depends(get_current_identity),
) -> UserRead:
    """Return a user profile.  Only the user themselves or an admin may read it."""
    return await UserService.get_user(user_id, current_user)


@router.get("/users", response_model=UserPage)
async def list_users(
    limit: Optional[str] = Query(None, description="Page size, clamped to 1..50 (default 20)"),
    cursor: Optional[str] = Query(None, description="Id of the last user of the previous page"),
    current_user: Identity = Depends(require_admin),
) -> UserPage:
    """List all users, newest first.  Admins only."""
    return await UserService.list_users(limit=limit, cursor=cursor)
