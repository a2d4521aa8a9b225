"""
Shared schema helpers and small response bodies.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.errors import ValidationFailed

ModelT = TypeVar("ModelT", bound=BaseModel)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date_only(value: Any) -> Any:
    """Accept bare ``YYYY-MM-DD`` strings as midnight UTC.

    Anything else is handed to pydantic's own datetime parsing.
    """
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            try:
                return datetime.combine(date.fromisoformat(text), time.min, tzinfo=timezone.utc)
            except ValueError:
                return value
    return value


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
    details: Optional[dict] = None


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    uptime: float
    version: str


def parse_payload(model: Type[ModelT], data: Any) -> ModelT:
    """Validate a raw request body against ``model``.

    Used by routes that must run their membership checks before the body
    is looked at.  Failures become ``ValidationFailed`` with the same
    issue layout as FastAPI's own body validation.
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailed.from_errors(exc.errors()) from exc


def request_body_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """``openapi_extra`` documenting a body that is validated by hand."""
    schema = model.model_json_schema(ref_template="#/components/schemas/{model}")
    schema.pop("$defs", None)
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": schema}},
        }
    }
