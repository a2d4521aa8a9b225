"""
Top-level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.  The
checklist and expense routers define event sub-resources, so they share
the ``/events`` prefix with the events router.
"""

from fastapi import APIRouter

from camptogether_api.app.schemas.common import ErrorResponse

from .endpoints import auth, checklist, events, expenses

# Every failure is rendered as ``{"error": ..., "details"?: ...}``.
router = APIRouter(
    responses={code: {"model": ErrorResponse} for code in (400, 401, 403, 404)},
)

router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(checklist.router, prefix="/events", tags=["checklist"])
router.include_router(expenses.router, prefix="/events", tags=["expenses"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
