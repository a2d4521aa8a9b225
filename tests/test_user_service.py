import pytest

from camptogether_api.app.core.config import settings
from camptogether_api.app.core.db import Collections
from camptogether_api.app.core.errors import Forbidden, NotFound
from camptogether_api.app.core.security import Identity
from camptogether_api.app.services.user_service import UserService

from .fakes import ADMIN, GUEST, HOST


@pytest.mark.asyncio
async def test_first_login_creates_record(store):
    user = await UserService.get_or_create(HOST)
    assert user.id == HOST.id
    assert user.uid == HOST.id
    assert user.email == HOST.email
    assert user.display_name == HOST.display_name
    assert user.photo_url == HOST.picture
    assert user.roles == []
    assert user.created_at == user.last_login_at
    assert HOST.id in store.collections[str(Collections.USERS)]


@pytest.mark.asyncio
async def test_admin_role_derived_from_allowlist():
    user = await UserService.get_or_create(ADMIN)
    assert user.roles == ["admin"]


@pytest.mark.asyncio
async def test_removal_from_allowlist_revokes_admin(monkeypatch):
    await UserService.get_or_create(ADMIN)
    monkeypatch.setattr(settings, "admin_emails", frozenset())
    user = await UserService.get_or_create(ADMIN)
    assert user.roles == []


@pytest.mark.asyncio
async def test_repeat_login_refreshes_without_erasing(store):
    first = await UserService.get_or_create(HOST)
    bare = Identity(id=HOST.id, email=HOST.email, display_name="Hannah H.")
    second = await UserService.get_or_create(bare)

    assert second.display_name == "Hannah H."
    assert second.photo_url == HOST.picture
    assert second.created_at == first.created_at
    assert second.last_login_at >= first.last_login_at
    assert store.collections[str(Collections.USERS)][HOST.id]["photo_url"] == HOST.picture


@pytest.mark.asyncio
async def test_users_read_their_own_record():
    await UserService.get_or_create(GUEST)
    user = await UserService.get_user(GUEST.id, GUEST)
    assert user.email == GUEST.email


@pytest.mark.asyncio
async def test_reading_someone_else_is_forbidden():
    await UserService.get_or_create(GUEST)
    with pytest.raises(Forbidden):
        await UserService.get_user(GUEST.id, HOST)


@pytest.mark.asyncio
async def test_admin_reads_anyone_and_missing_is_not_found():
    await UserService.get_or_create(GUEST)
    assert (await UserService.get_user(GUEST.id, ADMIN)).id == GUEST.id
    with pytest.raises(NotFound) as exc_info:
        await UserService.get_user("ghost", ADMIN)
    assert exc_info.value.message == "User not found"


@pytest.mark.asyncio
async def test_list_users_pages_newest_first():
    for identity in (HOST, GUEST, ADMIN):
        await UserService.get_or_create(identity)

    first = await UserService.list_users(limit="2")
    second = await UserService.list_users(limit="2", cursor=first.next_cursor)

    ids = [user.id for user in first.items + second.items]
    assert len(first.items) == 2
    assert sorted(ids) == sorted([HOST.id, GUEST.id, ADMIN.id])
    created = [user.created_at for user in first.items + second.items]
    assert created == sorted(created, reverse=True)
