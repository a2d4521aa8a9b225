"""
Authorization decisions.

Pure functions over already-loaded data.  Callers fetch an event once and
reuse it for every check in a request.  A missing identity fails every
check, so routes that need a caller must reject anonymous requests first.

Admin status is never stored authority: it is derived from the configured
``ADMIN_EMAILS`` allowlist each time it is needed, so removing an address
from the allowlist revokes admin on the next request or login.
"""

from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Optional

from .config import settings

if TYPE_CHECKING:
    from .security import Identity


ADMIN_ROLE = "admin"


def is_admin_email(email: Optional[str], allowlist: Optional[Iterable[str]] = None) -> bool:
    """Return True if ``email`` is in the admin allowlist (case-insensitive).

    An empty allowlist grants nobody admin.
    """
    admins = settings.admin_emails if allowlist is None else frozenset(a.lower() for a in allowlist)
    if not email or not admins:
        return False
    return email.strip().lower() in admins


def is_admin(identity: Optional["Identity"]) -> bool:
    if identity is None:
        return False
    return is_admin_email(identity.email)


def derive_roles(email: Optional[str]) -> List[str]:
    return [ADMIN_ROLE] if is_admin_email(email) else []


def _field(event: Any, name: str) -> Any:
    if isinstance(event, Mapping):
        return event.get(name)
    return getattr(event, name, None)


def can_manage_event(event: Any, identity: Optional["Identity"]) -> bool:
    """Host and admins may edit or delete an event."""
    if identity is None:
        return False
    if is_admin(identity):
        return True
    return _field(event, "host_id") == identity.id


def is_event_member(event: Any, identity: Optional["Identity"]) -> bool:
    """Admins, the host and listed attendees may see event sub-resources."""
    if identity is None:
        return False
    if can_manage_event(event, identity):
        return True
    attendees = _field(event, "attendee_ids") or []
    return identity.id in attendees
