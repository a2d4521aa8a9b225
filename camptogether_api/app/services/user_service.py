"""
Business logic for users.

User records are keyed by the identity provider's user id and are only
written by ``get_or_create``, which runs every time a caller fetches
``/api/auth/me`` (upsert on login).  Roles are recomputed from the admin
allowlist on each login rather than trusted from the stored record.
"""

import logging
from typing import Any, Dict, Optional

from ..core.db import Collections, OrderByDirection, get_store
from ..core.errors import Forbidden, NotFound
from ..core.permissions import derive_roles, is_admin
from ..core.security import Identity
from ..schemas.user import UserPage, UserRead
from .common import clamp_limit, next_cursor, utcnow

logger = logging.getLogger(__name__)


class UserService:
    """Directory of user profiles."""

    @classmethod
    async def get_or_create(cls, identity: Identity) -> UserRead:
        """Create the caller's record or refresh it from the identity.

        Profile fields are only overwritten with non-empty values, so a
        token without e.g. a picture never erases a stored one.
        """
        store = get_store()
        now = utcnow()
        roles = derive_roles(identity.email)
        existing = await store.get(Collections.USERS, identity.id)

        if existing is None:
            record = {
                "uid": identity.id,
                "email": identity.email,
                "display_name": identity.display_name,
                "photo_url": identity.picture,
                "roles": roles,
                "created_at": now,
                "last_login_at": now,
            }
            await store.set(Collections.USERS, identity.id, record)
            logger.info(
                "Created user %s (admin=%s)",
                identity.id,
                bool(roles),
                extra={"operation": "create_user", "user_id": identity.id},
            )
            return UserRead(id=identity.id, **record)

        updates: Dict[str, Any] = {"roles": roles, "last_login_at": now}
        for field, value in (
            ("email", identity.email),
            ("display_name", identity.display_name),
            ("photo_url", identity.picture),
        ):
            if value:
                updates[field] = value
        await store.update(Collections.USERS, identity.id, updates)
        if existing.get("roles", []) != roles:
            logger.info(
                "Roles of user %s changed to %s",
                identity.id,
                roles,
                extra={"operation": "refresh_user", "user_id": identity.id, "roles": roles},
            )
        existing.update(updates)
        existing.setdefault("uid", identity.id)
        return UserRead(**existing)

    @classmethod
    async def get_user(cls, user_id: str, caller: Identity) -> UserRead:
        """Users may read their own record; admins may read any."""
        if caller.id != user_id and not is_admin(caller):
            raise Forbidden()
        record = await get_store().get(Collections.USERS, user_id)
        if record is None:
            raise NotFound("User not found")
        record.setdefault("uid", user_id)
        return UserRead(**record)

    @classmethod
    async def list_users(cls, limit: Any = None, cursor: Optional[str] = None) -> UserPage:
        """Page through all users, newest first (admin view)."""
        documents = await get_store().query(
            Collections.USERS,
            order_by=[("created_at", OrderByDirection.DESCENDING)],
            limit=clamp_limit(limit),
            start_after=cursor or None,
        )
        for doc in documents:
            doc.setdefault("uid", doc["id"])
        return UserPage(
            items=[UserRead(**doc) for doc in documents],
            next_cursor=next_cursor(documents),
        )
