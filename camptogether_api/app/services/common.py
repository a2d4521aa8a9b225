"""
Helpers shared by the services.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def clamp_limit(raw: Any, default: int = DEFAULT_PAGE_SIZE, maximum: int = MAX_PAGE_SIZE) -> int:
    """Turn a client supplied page size into a value in ``[1, maximum]``.

    Missing or non-numeric values fall back to ``default``.
    """
    if raw is None or raw == "":
        value = default
    else:
        try:
            value = int(raw)
        except (TypeError, ValueError):
            value = default
    return min(max(value, 1), maximum)


def next_cursor(documents: List[Dict[str, Any]]) -> Optional[str]:
    """The cursor for the following page is the id of the last document."""
    return documents[-1]["id"] if documents else None
