"""
Pydantic models for event data.

``EventCreate`` and ``EventUpdate`` validate request bodies before any
service logic runs; ``EventRead`` is the response shape.  Dates accept
ISO dates (``2026-02-10``) or datetimes and are normalised to UTC.

Date ordering is checked on create.  On update it is only checked when
both dates are part of the same patch, so a patch that moves a single
date can still leave ``end_date`` before ``start_date``.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from .common import as_utc, parse_date_only


DATE_ORDER_MESSAGE = "End date must be after start date"
NULL_MESSAGE = "Field may not be null"


class _EventDates(BaseModel):
    """Validators shared by the create and update schemas."""

    @field_validator("start_date", "end_date", mode="before", check_fields=False)
    @classmethod
    def _parse_dates(cls, value):
        return parse_date_only(value)

    @field_validator("start_date", "end_date", check_fields=False)
    @classmethod
    def _normalise_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None

    @field_validator("end_date", check_fields=False)
    @classmethod
    def _end_not_before_start(cls, value: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        start = info.data.get("start_date")
        if value is not None and start is not None and as_utc(value) < as_utc(start):
            raise ValueError(DATE_ORDER_MESSAGE)
        return value


class EventCreate(_EventDates):
    """Schema for creating an event."""

    title: str = Field(..., min_length=1, max_length=120, examples=["Camp Together"])
    description: str = Field("", max_length=2000)
    location_name: str = Field("", max_length=120, examples=["Pine Lake"])
    location_address: str = Field("", max_length=200)
    start_date: datetime = Field(..., examples=["2026-02-10"])
    end_date: datetime = Field(..., examples=["2026-02-12"])
    is_public: bool = False
    notices: str = Field("", max_length=2000)
    cover_image: str = Field("", max_length=500)
    google_map_url: str = Field("", max_length=500)


class EventUpdate(_EventDates):
    """Schema for updating an event.

    All fields are optional; only provided fields will be updated.  A field
    that is present must carry a value: ``null`` is rejected rather than
    silently ignored.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = Field(None, max_length=2000)
    location_name: Optional[str] = Field(None, max_length=120)
    location_address: Optional[str] = Field(None, max_length=200)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_public: Optional[bool] = None
    notices: Optional[str] = Field(None, max_length=2000)
    cover_image: Optional[str] = Field(None, max_length=500)
    google_map_url: Optional[str] = Field(None, max_length=500)

    @field_validator("*", mode="before")
    @classmethod
    def _reject_null(cls, value):
        # Defaults are not validated, so this only sees fields the client sent.
        if value is None:
            raise ValueError(NULL_MESSAGE)
        return value


class EventRead(BaseModel):
    """Schema for reading an event from the API."""

    id: str
    title: str
    title_lower: str = ""
    description: str = ""
    location_name: str = ""
    location_address: str = ""
    start_date: datetime
    end_date: datetime
    host_id: str
    attendee_ids: List[str] = Field(default_factory=list)
    invite_token: str = ""
    is_public: bool = False
    notices: str = ""
    cover_image: str = ""
    google_map_url: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EventPage(BaseModel):
    items: List[EventRead]
    next_cursor: Optional[str] = None
