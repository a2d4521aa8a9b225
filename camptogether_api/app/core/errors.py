"""
Error taxonomy shared by services and the HTTP layer.

Services raise these exceptions for expected failures; ``main.py``
registers a handler that renders any ``ApiError`` as
``{"error": message, "details": ...}`` with the matching status code.
Anything else is an internal failure and collapses to a generic 500.
"""

from typing import Any, Dict, List, Optional, Sequence

from fastapi import status

_REQUEST_PARTS = {"body", "query", "path", "header", "cookie"}


class ApiError(Exception):
    """Base class for failures that map directly to a 4xx response."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Bad request"
    headers: Optional[Dict[str, str]] = None

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationFailed(ApiError):
    """Payload failed schema validation.

    ``issues`` is a list of ``{"path": [...], "message": str, "code": str}``
    entries, one per offending field.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"

    def __init__(self, issues: List[Dict[str, Any]], message: Optional[str] = None):
        self.issues = issues
        super().__init__(message, details={"issues": issues})

    @classmethod
    def from_errors(cls, errors: Sequence[Dict[str, Any]]) -> "ValidationFailed":
        """Build from pydantic/FastAPI error dicts (``loc``, ``msg``, ``type``).

        The request part prefix (``body``, ``query`` ...) is dropped from
        each location so paths name the payload field directly.
        """
        issues = []
        for error in errors:
            loc = list(error.get("loc", ()))
            if loc and loc[0] in _REQUEST_PARTS:
                loc = loc[1:]
            issues.append({"path": loc, "message": error.get("msg", ""), "code": error.get("type", "")})
        return cls(issues)


class ItemEventMismatch(ApiError):
    """A checklist item id was used under an event it does not belong to."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Item does not belong to event"
